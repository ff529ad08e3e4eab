"""
Weekly operating hours: validation, normalization and open/closed queries.
"""

__version__ = "1.0.0"
