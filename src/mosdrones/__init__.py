"""MOS Drones delivery order core."""

__version__ = "0.1.0"
