"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (health, recommendations, sessions).
Routes validate input with Pydantic, call the service layer and translate
service exceptions into HTTP errors; they hold no business logic.
"""
