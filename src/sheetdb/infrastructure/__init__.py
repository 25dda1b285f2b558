"""Infrastructure layer - External dependencies and implementations.

This layer contains all external dependencies including:
- Backing table stores (in-memory, SQLAlchemy)
- API routes (FastAPI)
- The generated client driver template (Jinja2)
"""
