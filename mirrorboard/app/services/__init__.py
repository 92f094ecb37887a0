"""Interaction and widget data services."""
