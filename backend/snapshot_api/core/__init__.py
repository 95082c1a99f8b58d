"""Core Layer — pure domain logic with no I/O.

Invariants:
    - core/ never imports from infrastructure/, services/ or api/
    - Functions here are deterministic given their inputs (time is passed in)
"""
