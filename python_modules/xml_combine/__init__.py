"""Combine XML (or headerless CSV) fragment files into a single file"""

__version__ = "1.0.0"
