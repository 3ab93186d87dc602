"""Command line interface for bibadd."""
