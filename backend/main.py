# backend/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from config import Settings, settings as default_settings
from database import init_db
from routes.products import router as products_router

logger = logging.getLogger(__name__)


def _field_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        # loc starts with the request part ("body", "path", "query")
        loc = [str(p) for p in err.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg")})
    return errors


def configure_logging(settings: Settings) -> None:
    # No-op when the server (or pytest) already installed root handlers
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        # The store lives for the whole process and is handed to routes via get_db
        app.state.db = init_db(settings)
        result = await app.state.db.connect()
        if not result.success:
            logger.error("Database connection failed: %s", result.error)
        yield

    app = FastAPI(title="Product Catalog API", version="1.0.0", lifespan=lifespan)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation failed", "errors": _field_errors(exc)},
        )

    app.include_router(products_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def read_root():
        return {"message": "Product Catalog API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging(default_settings)
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
