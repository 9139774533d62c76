"""Utility helpers shared across Mycelia."""
