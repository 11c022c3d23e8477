"""Command-line interface for TextHound."""
