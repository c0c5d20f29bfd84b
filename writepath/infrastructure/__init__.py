"""Infrastructure Layer — database client and logging setup.

Invariants:
    - Infrastructure never imports from services/
    - SQLAlchemy exceptions never escape this layer unmapped
"""
