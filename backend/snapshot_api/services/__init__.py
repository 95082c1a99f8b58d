"""Services Layer — orchestrates Azure adapters for each API operation.

Invariants:
    - Services never touch HTTP objects directly (routes pass callables in)
"""
