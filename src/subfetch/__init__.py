"""subfetch - unattended subtitle acquisition for local media libraries."""

__version__ = "0.1.0"
