"""Core types, configuration and utilities for TextHound."""
