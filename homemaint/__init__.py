"""Home maintenance tracker: assets, warranties, service history and tasks."""

__version__ = "0.1.0"
