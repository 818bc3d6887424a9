"""
Nurture backend - identity sync between Clerk and MongoDB.
"""
__version__ = "0.1.0"
