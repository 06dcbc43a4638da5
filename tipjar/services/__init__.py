"""Services Layer - session components running on the asyncio event loop.

Invariants:
    - Every timer handle and task has an explicit cancellation path
    - Each component keeps at most one outstanding handle per timer kind
    - State changes are computed by core/ transitions and applied atomically

Design Decisions:
    - asyncio tasks for clocks and network reads alike, one TaskSlot per kind
"""
