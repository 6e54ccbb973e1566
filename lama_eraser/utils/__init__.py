"""Utility helpers."""
