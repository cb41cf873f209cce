"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - The one outbound network call (RPC health ping) carries an explicit timeout
"""
