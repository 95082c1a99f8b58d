"""Infrastructure Layer — Azure SDK adapters and cross-cutting concerns.

Invariants:
    - All Azure calls are blocking; callers dispatch them to a worker thread
    - Every SDK failure is mapped to a SnapshotApiError subclass (core/errors.py)
"""
