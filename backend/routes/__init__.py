"""
FastAPI routers for all API endpoints.

Each module defines a router for one resource (facilities, keywords, export,
auth, health). backend/main.py mounts them all under /api.
"""
