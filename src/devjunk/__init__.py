"""devjunk: find and remove development build and cache directories."""

__version__ = "0.1.0"
