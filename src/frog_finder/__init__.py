"""
Frog Finder - photographic identification of individual frogs.

Ranks a labeled corpus of standard photos against target photos using
local feature descriptors and Lowe's nearest-neighbour ratio test.
"""

__version__ = "0.1.0"
