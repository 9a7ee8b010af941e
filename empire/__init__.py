"""Empire economy and logistics simulation engine."""

__version__ = "0.1.0"
