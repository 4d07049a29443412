"""Catalog JSON service."""
