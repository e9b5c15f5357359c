# ABOUTME: Shelfmark extracts normalized metadata from EPUB and comic archive containers.
# ABOUTME: read_book() is the main entry point; format modules live in shelfmark.formats.

__version__ = "0.1.0"
