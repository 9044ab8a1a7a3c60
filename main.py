import os
import importlib
import logging
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from config.database import engine, Base
from config.logging_config import setup_logging
from config.settings import settings
from helpers.response_helper import error_response, message_response
from middlewares.request_logging_middleware import RequestLoggingMiddleware
from utils.exceptions import AuthError, GENERIC_ERROR_MESSAGE
# register tables on Base.metadata
from api.user.user_model import User  # noqa: F401
from api.otp.otp_model import OTP  # noqa: F401

setup_logging()
logger = logging.getLogger(settings.APP_NAME)

PROJECT_ROOT = Path(__file__).parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    # dev convenience; deployed databases are migrated with alembic
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.APP_NAME)
    yield

app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None,
)
# CORS: use our parsed list
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)
#middlewares
app.add_middleware(RequestLoggingMiddleware)

#load all routes
def load_routes(directory: Path):
    routers = []
    for item in sorted(directory.rglob("*_routes.py")):
        module_name = ".".join(item.relative_to(PROJECT_ROOT).with_suffix("").parts)
        module = importlib.import_module(module_name)
        if hasattr(module, "router"):
            routers.append(module.router)
    return routers

for router in load_routes(PROJECT_ROOT / "api"):
    app.include_router(router, prefix=settings.API_V1_PREFIX)


# Exception handlers
@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return error_response(exc.message, exc.status_code, exc.errors)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        field = str(err["loc"][-1]) if err.get("loc") else "body"
        errors.setdefault(field, err.get("msg", "Invalid value"))
    return error_response("Invalid data", 422, errors)

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return error_response(GENERIC_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.get(settings.API_V1_PREFIX)
def index():
    return message_response("Welcome to chat api.")

@app.get("/health")
def health_check():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", settings.PORT))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=settings.DEBUG)
