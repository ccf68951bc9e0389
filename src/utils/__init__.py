"""Shared helpers: logging, errors, settings, time policy, codes."""
