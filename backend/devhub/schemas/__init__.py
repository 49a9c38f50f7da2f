"""Pydantic record and response models."""
