"""Watering domain models: events and dryness."""
