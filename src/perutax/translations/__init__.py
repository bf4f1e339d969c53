"""Shared translation catalogues (JSON resources)."""
