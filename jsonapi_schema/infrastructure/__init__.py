"""Infrastructure Layer — model loading and cross-cutting concerns (logging).

Invariants:
    - Infrastructure may call into core/, never the reverse
"""
