"""Password reset email delivery with simulated fallback."""

__version__ = "1.0.0"
