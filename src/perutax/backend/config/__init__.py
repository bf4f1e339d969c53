"""Fiscal year configuration models and loaders."""
