"""
Book catalogue API.

A small FastAPI service that serves a catalogue of books and their
reviews. Both collections live in memory and are mirrored to two JSON
documents on disk (``books.json`` and ``reviews.json``), which are read
once at start-up and rewritten in full after every accepted write.
"""

__version__ = "1.0.0"
