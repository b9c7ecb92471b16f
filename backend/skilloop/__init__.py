# backend/skilloop/__init__.py
"""Skilloop training marketplace backend."""

__version__ = "0.1.0"
