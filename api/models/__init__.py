"""Modelos pydantic de la API."""
