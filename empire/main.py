from __future__ import annotations

# Entrypoint module for ASGI servers: uvicorn empire.main:app
from empire.api.routes import create_app

app = create_app()

__all__ = ["app"]
