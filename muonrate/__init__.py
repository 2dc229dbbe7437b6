"""Validation, conversion, filtering, histogramming and rate fitting of three-module detector event data."""

__version__ = "0.1.0"