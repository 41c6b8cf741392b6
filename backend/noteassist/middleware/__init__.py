# Middleware package init
"""
NoteAssist Backend — Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

Request ID runs first so the access log line and every error body share
the same correlation ID.
"""
