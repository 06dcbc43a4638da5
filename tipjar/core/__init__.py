"""Core Layer - pure domain logic, no IO, no timers.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic (clock values are passed in)

Design Decisions:
    - Functional core separated from imperative shell: services/ owns every
      asyncio handle and network call, core/ only computes the next state
"""
