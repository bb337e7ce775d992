"""Scope directory and permission checks backed by static (YAML) configuration."""
