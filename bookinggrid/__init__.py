"""
bookinggrid - weekly appointment availability for a small service business.
"""

__version__ = "0.1.0"
