"""Backend API modules for filedrop.

Each module provides:
- router.py: FastAPI router with endpoints
- service.py: Business logic
- schemas.py: Pydantic models (if applicable)
"""
