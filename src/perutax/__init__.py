"""Peruvian personal income tax calculator."""
