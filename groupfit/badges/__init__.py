"""Group badges."""
