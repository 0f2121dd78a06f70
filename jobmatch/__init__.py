"""Résumé parsing, job aggregation and explainable job matching."""

__version__ = "0.1.0"
