# Middleware package init
"""
Mixtape Backend — Middleware Package
=====================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line carries the correlation ID;
    the ID is written to the response headers on the way out.
"""
