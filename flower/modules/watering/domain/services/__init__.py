"""Watering domain services."""
