# app.py - FastAPI server for BTR guidance-program applications
import logging
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from config import Settings
from db import ApplicationStore, duplicate_field
import schemas

logger = logging.getLogger("btr-backend")

SUCCESS_MESSAGE = "Application submitted successfully!"
SERVER_ERROR_MESSAGE = "Server error: the application could not be saved. Please try again later."
DUPLICATE_MESSAGES = {
    "tcNo": "An application has already been submitted with this T.C. identity number.",
    "email": "An application has already been submitted with this email address.",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the store on startup, release its pool on shutdown."""
    store: ApplicationStore = app.state.store
    try:
        store.connect()
    except Exception:
        # requests fail with 500 until the database is reachable
        logger.exception("[STARTUP] Database connection failed")
    logger.info("[STARTUP] BTR applications API started")
    try:
        yield
    finally:
        store.close()
        logger.info("[SHUTDOWN] BTR applications API stopped")


# Dependency
def get_store(request: Request) -> ApplicationStore:
    return request.app.state.store


def create_app(settings: Optional[Settings] = None, store: Optional[ApplicationStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="BTR Applications API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store or ApplicationStore(
        settings.database_url,
        academic_year=settings.academic_year,
        semester=settings.semester,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        messages = schemas.validation_messages(exc.errors())
        logger.warning("Validation error on %s: %s", request.url.path, messages)
        return error_response(status.HTTP_400_BAD_REQUEST, ", ".join(messages))

    @app.post(
        "/api/btr-applications",
        status_code=status.HTTP_201_CREATED,
        response_model=schemas.ApplicationCreated,
        responses={
            400: {"model": schemas.ErrorResponse},
            409: {"model": schemas.ErrorResponse},
            500: {"model": schemas.ErrorResponse},
        },
    )
    def submit_application(payload: schemas.ApplicationIn, store: ApplicationStore = Depends(get_store)):
        try:
            application_id = store.create_application(payload.to_columns())
        except IntegrityError as e:
            field = duplicate_field(e)
            if field in DUPLICATE_MESSAGES:
                logger.warning("Duplicate %s rejected", field)
                return error_response(status.HTTP_409_CONFLICT, DUPLICATE_MESSAGES[field])
            logger.exception("IntegrityError inserting application")
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)
        except Exception:
            logger.exception("Error inserting application")
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)

        logger.info("Application saved; application_id=%s", application_id)
        return {"success": True, "message": SUCCESS_MESSAGE, "applicationId": application_id}

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/health/ready")
    def ready(store: ApplicationStore = Depends(get_store)):
        if not store.health_check():
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "database": "unavailable"},
            )
        return {"status": "ready", "database": "healthy"}

    return app


_settings = Settings.from_env()

# logging for debugging
logging.basicConfig(level=_settings.log_level)

app = create_app(_settings)


def main():
    uvicorn.run(app, host=_settings.host, port=_settings.port)


if __name__ == "__main__":
    main()
