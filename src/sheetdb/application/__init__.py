"""Application layer - use cases composed from domain services and a table store."""
