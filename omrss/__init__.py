"""Multicast routing and scheduling simulation for TSN and AVB flows."""

__version__ = "0.1.0"

__all__ = ["__version__"]