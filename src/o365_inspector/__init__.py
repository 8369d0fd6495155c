"""Office 365 installation and update baseline inspector."""

__version__ = "0.3.0"
