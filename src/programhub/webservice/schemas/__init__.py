"""Webservice request/response schemas."""
