# Middleware package init
"""
Notekeep Backend: Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Responses pass back through in reverse, so the request ID header is
    set and the access log sees the final status code.
"""
