"""Services — one module per write pattern.

Invariants:
    - Every operation takes the DatabaseSessionManager as its first argument
    - Every operation logs its outcome and returns a pydantic result
"""
