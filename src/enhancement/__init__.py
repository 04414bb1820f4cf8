"""enhancement package."""
