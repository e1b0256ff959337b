# Routes package init
"""
Notekeep Backend: API Routes Package
=====================================

What:  HTTP route handlers.

Route Inventory:
    - notes.py:   GET/POST /notes, GET/PATCH/DELETE /notes/{id}
    - health.py:  GET /health

Routes stay thin: read the request, call a service, shape the response.
"""
