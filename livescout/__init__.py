"""
livescout: discover and rank live YouTube broadcasts by scraping search results.
"""
__version__ = "0.1.0"
