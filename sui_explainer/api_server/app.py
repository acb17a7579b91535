"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn sui_explainer.api_server.app:app --host 0.0.0.0 --port 8000
"""

from sui_explainer.api_server.server import app

__all__ = ["app"]
