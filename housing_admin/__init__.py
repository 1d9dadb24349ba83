"""
Housing Admin Console: administrative API over the housing-registration backend.
"""

__version__ = "1.0.0"
