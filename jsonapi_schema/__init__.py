"""JSON:API Schema Package — compiles a resource model into a JSON Hyper-Schema document.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
