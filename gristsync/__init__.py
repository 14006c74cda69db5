"""Grist API Sync - push JSON API records into Grist tables."""

__version__ = "0.1.0"
