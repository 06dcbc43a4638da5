"""Infrastructure Layer - external service clients and cross-cutting concerns.

Invariants:
    - All external calls wrapped with timeout and error mapping
    - asyncio.CancelledError always passes through uncaught

Design Decisions:
    - Thin wrappers over a shared httpx.AsyncClient (one connection pool per process)
"""
