"""External identity provider adapters."""
