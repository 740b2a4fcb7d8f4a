# src/diagnosis/__init__.py — v1
