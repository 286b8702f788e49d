# Middleware package init
"""
Team Cook API: Middleware Package
===================================

What:  Cross-cutting concerns applied to every request, outside the handler chain.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route (status | handler chain)

    1. Request ID first: every later log line can include it
    2. Logging: measures the full route + chain duration and sees X-Cache

The handler chain is not Starlette middleware. It runs inside the catch-all
route, so its handlers can be matched per path and composed explicitly.
"""
