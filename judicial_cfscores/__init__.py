"""Judicial CF Score Analysis."""
