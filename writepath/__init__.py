"""writepath — write-operation patterns against PostgreSQL via the SQLAlchemy async ORM.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
