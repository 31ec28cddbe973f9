"""
Community Blog Backend

A FastAPI backend for a community blogging platform with a pre-launch
waitlist. Provides accounts, articles, threaded comments, follows,
bookmarks and reading history.
"""

__version__ = "1.0.0"
