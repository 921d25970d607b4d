"""Route Modules — one file per concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain compiler logic
"""
