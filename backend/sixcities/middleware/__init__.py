"""
Six Cities Backend — Application Middleware
=============================================

ASGI-level concerns applied to every request, before routing:

    Request → [Request ID] → [Logging] → [GZip] → [CORS] → route pipeline

Per-route checks (validation, authentication, uploads) are not here; they live
in sixcities.rest.middlewares and run inside the controller pipeline.
"""
