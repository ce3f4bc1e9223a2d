"""
CXFER - content transfer between configuration databases.
"""

__version__ = "0.1.0"
