"""
Flashpoint packer.

Groups a curated content collection into distributable ZIP archives and
writes a manifest describing each archive's name, size and SHA-256 digest.
"""

__version__ = "1.0.0"
