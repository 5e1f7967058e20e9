"""
Stock portfolio tracker.
A web page for entering positions and a Discord bot that refreshes prices
and alerts when target entry/exit prices are crossed.
"""

__version__ = "0.1.0"
