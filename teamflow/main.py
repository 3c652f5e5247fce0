# teamflow/main.py
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from teamflow.api.auth import router as auth_router
from teamflow.api.bugs import router as bugs_router
from teamflow.api.error_handlers import register_error_handlers
from teamflow.api.health import router as health_router
from teamflow.api.hotfixes import router as hotfixes_router
from teamflow.api.invites import router as invites_router
from teamflow.api.members import router as members_router
from teamflow.api.releases import router as releases_router
from teamflow.api.users import router as users_router
from teamflow.api.workspaces import router as workspaces_router
from teamflow.core.config import settings
from teamflow.core.logging import configure_logging

configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    description=settings.api_description,
    debug=settings.debug,
)

register_error_handlers(app)

# no access token required
OPEN_PATHS = {"/health", "/auth/signup", "/auth/login", "/auth/refresh"}


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schema["components"]["securitySchemes"]["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "Access token from POST /auth/login.",
    }

    # Apply globally, then clear it on public endpoints.
    schema["security"] = [{"BearerAuth": []}]
    for path in OPEN_PATHS:
        if path in schema.get("paths", {}):
            for _method, op in schema["paths"][path].items():
                if isinstance(op, dict):
                    op["security"] = []

    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi

app.include_router(health_router, tags=["health"])
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(workspaces_router)
app.include_router(members_router)
app.include_router(invites_router)
app.include_router(releases_router)
app.include_router(bugs_router)
app.include_router(hotfixes_router)
