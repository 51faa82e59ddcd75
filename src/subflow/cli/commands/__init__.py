"""Click command implementations."""
