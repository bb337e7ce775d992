"""Scope-aware authorization for configurable actions (buttons)."""
