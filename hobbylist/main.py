# hobbylist/main.py
from __future__ import annotations

# --- Framework ---
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from hobbylist.core.config import settings
from hobbylist.core.errors import register_error_handlers
from hobbylist.core.logging import configure_logging

# --- DB bootstrap ---
from hobbylist.db.database import Base, engine, init_models

# --- API routers (JSON) ---
from hobbylist.api.routes import (
    auth as auth_routes,
    users as users_routes,
)


# =============================================================================
# App instance
# =============================================================================
configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
    openapi_url="/openapi.json",
)

register_error_handlers(app)


# =============================================================================
# Startup: register models, create missing tables
# =============================================================================
@app.on_event("startup")
def on_startup() -> None:
    init_models()
    Base.metadata.create_all(bind=engine)


# =============================================================================
# Routers
# =============================================================================
app.include_router(auth_routes.router, prefix="/api/auth")
app.include_router(users_routes.router, prefix="/api/users")


@app.get("/health", include_in_schema=False)
def health() -> dict:
    return {"status": "ok"}


# =============================================================================
# OpenAPI: Bearer auth globally
# =============================================================================
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.APP_NAME,
        version="1.0.0",
        description="HobbyList API",
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    openapi_schema["components"]["securitySchemes"]["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    openapi_schema["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
