"""Accounts application layer: the explicit session context."""
