"""Shared helpers for the openapi plugin."""
