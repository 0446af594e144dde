"""Application layer: projection services."""
