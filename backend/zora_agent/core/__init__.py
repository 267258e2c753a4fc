"""Core Layer — pure domain logic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic (randomness only via injected RNG)

Design Decisions:
    - Functional core separated from imperative shell: routes and services do IO,
      core decides what each tier sees
"""
