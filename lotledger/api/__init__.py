"""API layer - FastAPI application, routes and middleware."""
