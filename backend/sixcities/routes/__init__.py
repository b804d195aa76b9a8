"""
Six Cities Backend — Plain FastAPI Routes
===========================================

Operational endpoints that sit outside the controller pipeline (no route
middlewares, no authentication).
"""
