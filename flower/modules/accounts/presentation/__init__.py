"""Headless view-models of the sign-in, registration and verify-email screens."""
