"""API Layer — FastAPI routes, dependencies, templates and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - JSON endpoints return camelCase bodies; HTML pages render Jinja2 templates

Design Decisions:
    - Thin routes delegate to services (impureim sandwich)
"""
