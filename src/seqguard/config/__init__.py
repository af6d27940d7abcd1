"""Configuration defaults, environment overrides and settings loading."""
