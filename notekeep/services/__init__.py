# Services package init
"""
Notekeep Backend: Services Layer
=================================

What:  Business logic between the routes (HTTP) and the store (persistence).

Service Inventory:
    - NoteService: list/get/create/update/delete passthrough with error mapping
    - health_service: evaluate_health() rules + probe_process() sampling
"""
