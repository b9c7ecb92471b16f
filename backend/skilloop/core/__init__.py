# backend/skilloop/core/__init__.py
