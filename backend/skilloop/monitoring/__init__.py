# backend/skilloop/monitoring/__init__.py
