import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv
import uvicorn

from database import check_connection
from routers import auth, properties, rental_requests, bookings, tenants, notifications, maintenance
from services.exceptions import (
    RentalsError,
    NotFoundError,
    UnauthorizedError,
    InvalidStateError,
    RentalValidationError,
    UnexpectedError,
)

# Load .env
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Service error -> HTTP status
STATUS_BY_ERROR = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    InvalidStateError: status.HTTP_409_CONFLICT,
    RentalValidationError: status.HTTP_400_BAD_REQUEST,
    UnexpectedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_body(kind: str, detail: str, errors=None) -> dict:
    return {"error": kind, "detail": detail, "errors": errors or []}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RentalsError)
    async def rentals_error(request: Request, exc: RentalsError):
        status_code = next(
            (code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        if status_code >= 500:
            logger.error("Unexpected error on %s %s: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content=_error_body(exc.kind, exc.message, getattr(exc, "errors", None)),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(UnexpectedError.kind, "An unexpected error occurred"),
        )


def create_app() -> FastAPI:
    app = FastAPI(title="eRents API")

    # CORS
    origins = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(properties.router)
    app.include_router(rental_requests.router)
    app.include_router(bookings.router)
    app.include_router(tenants.router)
    app.include_router(notifications.router)
    app.include_router(maintenance.router)
    register_exception_handlers(app)

    @app.get("/api/health", tags=["health"])
    def health():
        db_ok = check_connection()
        return JSONResponse(
            status_code=status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "ok" if db_ok else "degraded", "database": db_ok},
        )

    return app


# App instance
app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
