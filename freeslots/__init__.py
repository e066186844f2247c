"""
freeslots - find free meeting slots in a public calendar feed.
"""

__version__ = "0.1.0"
