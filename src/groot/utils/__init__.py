"""Utility helpers for Groot."""
