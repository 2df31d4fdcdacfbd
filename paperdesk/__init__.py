"""
paperdesk - owner-scoped papers with keyset pagination and scoped tokens.
"""

__version__ = "0.1.0"
