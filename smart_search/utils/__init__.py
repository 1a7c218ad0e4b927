"""Utility modules for smart-search."""
