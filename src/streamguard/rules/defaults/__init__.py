"""Bundled rule catalog."""
