"""Core primitives: time handling and validation."""
