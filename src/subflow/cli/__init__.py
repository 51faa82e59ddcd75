"""Command-line interface for subflow."""
