# backend/skilloop/schemas/__init__.py
"""Pydantic request/response models."""
