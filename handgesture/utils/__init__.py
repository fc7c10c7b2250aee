"""Configuration, logging and visualization helpers."""
