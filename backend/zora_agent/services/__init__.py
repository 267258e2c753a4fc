"""Services Layer — analytics, auth, billing, dev users, refresh job and the container.

Invariants:
    - Services receive repositories/providers through their constructor
    - Decisions live in core/; services only orchestrate IO around them

Design Decisions:
    - One container per app (container.build_container) instead of module singletons
"""
