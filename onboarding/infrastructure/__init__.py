"""Infrastructure Layer — blob store backends, database sessions, config loading, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every backend failure is mapped to BlobStoreError before leaving this layer

Design Decisions:
    - Thin backends: retry and serialization live in core/, not here
"""
