"""Core Layer — pure domain logic: record shapes, codec, retry policy, error taxonomy.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Codec and migration functions are pure and deterministic
    - The retry executor is the only async code here; its sleep is injected

Design Decisions:
    - Functional core separated from imperative shell (repositories + backends)
"""
