"""
Book Review API Application Package

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: MongoDB (motor) client and collection names
- exceptions.py: APIError, the expected-failure exception
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: Document models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic
"""

__version__ = "1.0.0"
