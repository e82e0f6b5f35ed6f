"""Devfile kernel: models, overrides, merging and reference resolution (no I/O)."""
