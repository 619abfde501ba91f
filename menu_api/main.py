# menu_api/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from menu_api.api import menu_routes
from menu_api.core.config import settings
from menu_api.core.exceptions import MenuError
from menu_api.db import create_db_and_tables

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Starting DB setup...")
    await create_db_and_tables()
    log.info("DB schema ready.")
    yield


# Create the FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="Menu Tree API",
    version="1.0.0",
    description="CRUD menus & submenus with hierarchical structure",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----- Domain errors -> {success: false, message}
@app.exception_handler(MenuError)
async def menu_error_handler(request: Request, exc: MenuError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}" for err in errors
    )
    log.info("validation failed: path=%s errors=%s", request.url.path, len(errors))
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message or "Invalid request"},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(menu_routes.router)
