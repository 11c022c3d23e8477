"""TextHound - republishes a single text file as display sensor values."""

__version__ = "1.0.0"
