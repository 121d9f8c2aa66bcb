"""distserve - static frontend bundle server with a diagnostic endpoint."""

__version__ = "0.1.0"
