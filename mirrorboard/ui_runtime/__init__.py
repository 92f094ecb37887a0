"""Pointer-to-cell resolution over measured grid tracks."""
