"""Salon color-inventory catalog: data access, aggregation and a thin API."""

__version__ = "0.1.0"
