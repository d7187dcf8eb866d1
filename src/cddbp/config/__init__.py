"""Configuration loading, derived settings, and client identity."""
