"""Core cross-cutting types: exceptions and subscription handles."""
