"""Core integrations and multi-repository logic."""
