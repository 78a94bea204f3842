"""Client core for the small-internet protocol family."""

__version__ = "0.1.0"
