"""epaper-studio: e-paper edition composer and publish workflow."""

__version__ = "0.1.0"
