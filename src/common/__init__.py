"""Helpers shared across the fetch, mapping and library layers."""
