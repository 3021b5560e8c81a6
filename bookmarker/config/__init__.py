"""Configuration constants and environment settings."""
