# Middleware package init
"""
DevHub Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    The request ID is assigned before the access log reads it, and is set on
    the response header on the way back out.
"""
