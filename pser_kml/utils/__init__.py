"""Shared helpers (geodesy)."""
