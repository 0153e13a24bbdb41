"""
meetslot - find shared free time across calendars.
"""

__version__ = "0.1.0"
