"""Pydantic schema package for API request and response models."""
