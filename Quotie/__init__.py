"""
Quotie - a personal quote journal with a hungry mascot.

The app side owns the quote collection and publishes a projection for the
read-only widget process (see Widget/).
"""

__version__ = "1.0.0"
