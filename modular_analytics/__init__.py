"""Modular Analytics — sector/client module configuration management."""

__version__ = "0.1.0"
