"""Core Layer — the schema compiler: pure functions, no IO, no async.

Invariants:
    - No module in core/ imports from api/ or infrastructure/
    - All functions are pure and deterministic; the resource model is read-only
"""
