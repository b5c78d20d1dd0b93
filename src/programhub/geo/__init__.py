"""Geospatial resolution: geocoding and radius queries."""
