"""Shared types, event bus and session pipeline."""
