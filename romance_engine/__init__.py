"""
Band Romance Engine

Relationship progression core of a band-management simulation: how two
characters' romance moves from flirting to marriage (or scandal).
"""

__version__ = "0.1.0"
