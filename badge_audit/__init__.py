"""Badge catalog consistency audit: duplicate rules and criteria taxonomy drift."""

__version__ = "1.0.0"
