"""Pydantic Schemas — wire models and response envelopes for API endpoints.

Invariants:
    - Wire JSON is camelCase; Python attributes are snake_case (alias generator)
    - Domain enums from core/ used for closed-set fields
"""
