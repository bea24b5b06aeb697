"""Core data types for the compute module."""
