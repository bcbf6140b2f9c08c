"""
WordPlay.

Turn-based word transformation game: players add, remove and rearrange
letters of a shared word, scoring a point per action type.
"""

__version__ = "0.1.0"
