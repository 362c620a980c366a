"""Watering screen view-model."""
