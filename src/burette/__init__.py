# ABOUTME: Burette - a content-addressed personal document library.
# ABOUTME: Stores PDF/EPUB files by SHA-256 hash with a JSON metadata index.

__version__ = "0.1.0"
