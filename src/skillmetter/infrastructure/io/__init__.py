"""Inbound payload validation."""
