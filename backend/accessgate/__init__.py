"""accessgate: role-based access decisions for the laundry operations dashboard."""

__version__ = "0.3.0"
