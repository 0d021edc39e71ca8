"""Stop-order optimization service for pickups, via points and destinations."""

__version__ = "1.0.0"
