"""Webservice services."""
