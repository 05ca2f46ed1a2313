"""Rutas de la API."""

from . import documents, mops, reviews

__all__ = ["documents", "mops", "reviews"]
