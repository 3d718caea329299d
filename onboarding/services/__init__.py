"""Services Layer — repositories composing blob store, codec, and retry executor.

Invariants:
    - Every public repository method raises only StorageError (or CancelledError)
    - Repositories hold no record cache; lists are computed at read time
"""
