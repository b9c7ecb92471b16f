# backend/skilloop/services/__init__.py
"""Business logic layer. Services own rules and transactions."""
