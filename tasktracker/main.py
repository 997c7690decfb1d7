import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasktracker.api.v1 import api_router
from tasktracker.config import settings
from tasktracker.database import Base, engine
from tasktracker.logging_setup import setup_logging

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid input")
    return f"{location}: {message}" if location else message


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unhandled store failure on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


@app.on_event("startup")
def on_startup():
    setup_logging(settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started, database=%s", settings.APP_NAME, settings.APP_VERSION, engine.url)


@app.get("/", include_in_schema=False, response_class=PlainTextResponse)
def root():
    return "API is running..."


def run():
    uvicorn.run("tasktracker.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
