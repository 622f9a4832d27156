# Middleware package init
"""
Image Tagger Backend — Middleware Package
===========================================

What:  Cross-cutting concerns applied to every request, plus the access guard.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler
                                                            └─ require_principal
                                                               (protected routes)

    - Request ID: correlation id for logs and error bodies
    - Logging: method, path, status, duration with the request id
    - CORS: browser clients on other origins (handles preflight)
    - Access guard: a FastAPI dependency rather than middleware, so public
      routes simply do not declare it
"""
