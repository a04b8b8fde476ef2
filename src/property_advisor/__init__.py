"""Smart property recommendations for the real-estate advisory site."""

__version__ = "0.1.0"
