"""Core Layer — pure domain logic, no IO, no transport.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: handlers and transport
      live outside core/
"""
