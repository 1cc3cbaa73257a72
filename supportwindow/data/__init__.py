"""Bundled runtime schedule tables."""
