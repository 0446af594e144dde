"""Pure calculation functions."""
