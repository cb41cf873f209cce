"""CommitLabs API Package — commitments, attestations and marketplace over a simulated Soroban layer.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
