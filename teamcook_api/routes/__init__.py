# Routes package init
"""
Team Cook API: Routes Package
===============================

Route Inventory:
    - status.py:  GET /api/status            (liveness, literal OK)
    - proxy.py:   GET /{anything else}       (handed to the handler chain)

The proxy router matches every path, so it must be included after every
other router.
"""
