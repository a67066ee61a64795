"""
bookingcheck - appointment availability, conflict and pricing rules.
"""

__version__ = "0.1.0"
