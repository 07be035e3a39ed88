"""Services Layer — capability registry, handlers, and dispatch.

Invariants:
    - Capabilities registered explicitly (no auto-discovery)
    - Dispatch never raises for a per-request failure

Design Decisions:
    - Registry passed to the dispatcher at construction: no process-wide singleton
"""
