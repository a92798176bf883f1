import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mathtemplate.catalog import ProblemCatalog
from mathtemplate.config import (
    get_cors_allow_origins,
    get_gemini_base_url,
    get_gemini_model,
    get_gemini_temperature,
    get_gemini_timeout_seconds,
    get_log_level,
    require_gemini_api_key,
)
from mathtemplate.errors import MathTemplateError
from mathtemplate.routers import analysis_router, generation_router, problems_router
from mathtemplate.services.gemini_client import GeminiClient
from mathtemplate.services.ocr_extractor import build_ocr_extractor

logger = logging.getLogger(__name__)


def create_app(*, model_client=None, ocr_extractor=None, catalog: ProblemCatalog | None = None) -> FastAPI:
    """Build the API application.

    Collaborators that are not passed in are created at startup. Without an
    injected model client, startup fails when ``GEMINI_API_KEY`` is missing.
    """
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if model_client is None:
            app.state.model_client = GeminiClient(
                api_key=require_gemini_api_key(),
                base_url=get_gemini_base_url(),
                model=get_gemini_model(),
                temperature=get_gemini_temperature(),
                timeout=get_gemini_timeout_seconds(),
            )
        else:
            app.state.model_client = model_client
        app.state.ocr_extractor = ocr_extractor if ocr_extractor is not None else build_ocr_extractor()
        app.state.catalog = catalog if catalog is not None else ProblemCatalog()
        logger.info("MathTemplate API started")
        yield
        logger.info("MathTemplate API stopped (%d problems discarded)", len(app.state.catalog))

    app = FastAPI(
        title="MathTemplate API",
        description="Math problem → template/blueprint analysis and similar problem generation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analysis_router)
    app.include_router(generation_router)
    app.include_router(problems_router)
    _register_exception_handlers(app)

    @app.get("/health")
    async def health_check(request: Request):
        return {
            "status": "ok",
            "service": "mathtemplate-api",
            "problems": len(request.app.state.catalog),
        }

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MathTemplateError)
    async def handle_domain_error(request: Request, exc: MathTemplateError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _format_validation_error(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def _format_validation_error(exc: RequestValidationError) -> str:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mathtemplate.main:app", host="0.0.0.0", port=8000)
