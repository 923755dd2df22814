"""Data layer: caching of raw upstream payloads."""
