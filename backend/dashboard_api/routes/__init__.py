# Routes package init
"""
Dashboard API — Routes Package
===============================

Route Inventory:
    - resources.py: GET/POST          /api/{resource}
                    GET/PATCH/DELETE  /api/{resource}/{id}
    - health.py:    GET               /health

Routes stay thin: resolve the resource, normalize the id, hand the rest to
services.resource_service. Errors are raised as DashboardError subclasses
and turned into JSON by the handlers registered in main.py.
"""
