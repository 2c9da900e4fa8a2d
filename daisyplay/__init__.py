"""Building blocks for playing DAISY talking books and Audio-CDs."""

__version__ = "0.1.0"
__all__ = ["__version__"]