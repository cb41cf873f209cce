"""API Layer — FastAPI routes, handler wrapper and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response body is a success or failure envelope

Design Decisions:
    - Thin routes delegate to core parsers and services
"""
