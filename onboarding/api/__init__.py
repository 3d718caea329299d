"""HTTP API Layer — FastAPI routers, dependencies, and global error handlers.

Invariants:
    - Routes talk to repositories only through dependencies.py
    - Request JSON becomes a record only via the codec (dates parsed, paths reported)

Design Decisions:
    - Routers registered explicitly in main.py (no auto-discovery)
"""
