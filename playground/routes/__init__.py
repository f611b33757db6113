"""
FastAPI routers for all API endpoints.

- health: public liveness check
- playground: image and text intent-to-JSON playgrounds
"""
