import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bittle.config import settings
from bittle.errors import EntityValidationError, FamilyTreeAssemblyError, StoreError
from bittle.middleware import SessionRedirectMiddleware

# Routers
from bittle.routers import (
    applicants_router,
    dashboard_router,
    family_tree_router,
    forms_router,
    input_code_router,
    manage_router,
    organization_router,
    tree_graph_router,
)

# -----------------------
# LOGGING
# -----------------------
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("bittle")

# -----------------------
# CREATE APP
# -----------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Big/little family pairing programs: forms, family trees, challenges.",
    version="1.0.0",
)

# -----------------------
# MIDDLEWARE
# -----------------------
app.add_middleware(SessionRedirectMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------
# ERRORS
# -----------------------
@app.exception_handler(StoreError)
def store_error_handler(request: Request, exc: StoreError):
    body = {"detail": exc.message, "kind": exc.kind}
    if isinstance(exc, FamilyTreeAssemblyError) and exc.partial is not None:
        body["partial"] = exc.partial.model_dump(mode="json")
    return JSONResponse(status_code=502, content=body)


@app.exception_handler(EntityValidationError)
def validation_error_handler(request: Request, exc: EntityValidationError):
    logger.error("Malformed %s from store: %s", exc.entity, exc.fields)
    return JSONResponse(
        status_code=502,
        content={"detail": exc.message, "kind": exc.kind, "fields": exc.fields},
    )


# -----------------------
# ROUTES
# -----------------------
app.include_router(dashboard_router.router)
app.include_router(forms_router.router)
app.include_router(organization_router.router)
app.include_router(family_tree_router.pages)
app.include_router(family_tree_router.router)
app.include_router(tree_graph_router.router)
app.include_router(manage_router.pages)
app.include_router(manage_router.router)
app.include_router(applicants_router.router)
app.include_router(input_code_router.router)


# -----------------------
# HEALTH CHECK
# -----------------------
@app.get("/health")
def health():
    return {"message": "Bittle API is running!"}


# -----------------------
# ENTRY POINT
# -----------------------
def run():
    """`bittle-api` console script; same as `uvicorn bittle.main:app`."""
    uvicorn.run(
        "bittle.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENV == "dev",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
