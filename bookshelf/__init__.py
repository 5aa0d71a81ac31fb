"""Bookshelf - Core Application Package

This package contains the core modules of the book service:
- Data model (book.py)
- Identifier generation (id_generator.py)
- In-memory book store (library.py)
- CLI output helpers (ui_helpers.py)
"""
