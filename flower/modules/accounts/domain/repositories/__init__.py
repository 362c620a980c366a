"""Repository interfaces of the accounts collections."""
