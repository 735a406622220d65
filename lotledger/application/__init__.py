"""
Application layer - Use cases, DTOs, and service factories.

Use cases are the only entry point for API write handlers.
"""
