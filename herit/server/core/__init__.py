"""Server settings and constants."""
