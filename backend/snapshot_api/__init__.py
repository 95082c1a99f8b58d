"""Azure Snapshot Control API — HTTP surface over Azure Compute snapshots.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
