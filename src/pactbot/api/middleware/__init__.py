"""Middleware for the PactBot API.

Note: For CORS, use FastAPI's built-in CORSMiddleware from starlette.middleware.cors
"""

from pactbot.api.middleware.correlation import CorrelationMiddleware

__all__ = ["CorrelationMiddleware"]
