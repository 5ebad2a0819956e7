"""Cookie-based sessions for Starlette/FastAPI applications."""

__version__ = "0.2.0"
