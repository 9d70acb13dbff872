"""Credential resolution."""
