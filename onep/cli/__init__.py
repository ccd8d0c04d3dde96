"""Command-line interface for one-p."""
