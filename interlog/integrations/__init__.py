"""Integrations with external document databases."""
