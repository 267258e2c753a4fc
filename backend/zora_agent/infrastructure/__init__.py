"""Infrastructure Layer — file storage, external provider clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Provider failures mapped to typed errors from core/errors.py

Design Decisions:
    - Each external collaborator (identity, payments, market data) sits behind an
      interface with a mock and a real implementation, chosen once at startup
"""
