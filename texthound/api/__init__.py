"""External entry points for TextHound."""
