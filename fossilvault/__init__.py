"""FossilVault: spreadsheet import pipeline for fossil collections."""

__version__ = "0.3.0"
