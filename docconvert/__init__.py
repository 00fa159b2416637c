"""
Document conversion API.

Merges, splits and builds PDF documents from uploaded files, and proxies
text recognition and generative text requests.
"""

__all__ = ["__version__"]

__version__ = "1.0.0"
