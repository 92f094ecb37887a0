"""Smart-mirror dashboard grid layout engine."""

__version__ = "0.1.0"
