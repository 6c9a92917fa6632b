"""
Gaming community backend: IGDB catalog proxy, Firebase identity bridge,
game libraries and threaded game comments
"""

__version__ = "1.0.0"
