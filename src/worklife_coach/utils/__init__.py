"""Shared utilities: logging, errors and retry, validation, rule tables, templates."""
