"""FastAPI application exposing the romanization endpoints."""

from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.pipeline import (
    MusicRomanizationPipeline,
    RomanizationPipeline,
    build_pipelines,
)
from .core.response import ResponseAssembler
from .exceptions import InternalError, InvalidInputError, RomanizerError
from .utils.logging import get_logger

logger = get_logger(__name__)


class RomanizeRequest(BaseModel):
    """POST /romanize body. Presence checks happen in the pipeline."""

    text: Optional[str] = Field(None, description="Text to romanize")
    language: Optional[str] = Field(
        None, description="Script code; detected when omitted"
    )
    romanization_system: Optional[str] = Field(None, description="System name")
    options: Optional[Dict[str, Any]] = Field(None, description="Rendering options")


class MusicRomanizeRequest(BaseModel):
    """POST /music-romanize body."""

    artist: Optional[str] = Field(None, description="Artist name")
    title: Optional[str] = Field(None, description="Song title")
    language: Optional[str] = Field(
        None, description="Script code; detected when omitted"
    )
    romanization_system: Optional[str] = Field(None, description="System name")
    music_platform: Optional[str] = Field(
        None, description="Restrict lookup to one source"
    )
    options: Optional[Dict[str, Any]] = Field(None, description="Rendering options")


def _run(func: Callable[..., Dict[str, Any]], **kwargs: Any) -> Dict[str, Any]:
    """Call a pipeline, turning unexpected failures into InternalError."""
    try:
        return func(**kwargs)
    except RomanizerError:
        raise
    except Exception as e:
        logger.exception("Unexpected pipeline failure")
        raise InternalError(f"Server error: {e}")


def create_app(
    text_pipeline: Optional[RomanizationPipeline] = None,
    music_pipeline: Optional[MusicRomanizationPipeline] = None,
) -> FastAPI:
    """Build the app around injected pipelines (defaults share one cache)."""
    if text_pipeline is None or music_pipeline is None:
        default_text, default_music = build_pipelines()
        text_pipeline = text_pipeline or default_text
        music_pipeline = music_pipeline or default_music

    assembler: ResponseAssembler = text_pipeline.assembler

    app = FastAPI(
        title="lyrics-romanizer",
        description=(
            "Romanization API for Chinese, Cantonese, Japanese, Korean and Russian"
        ),
        version=__version__,
    )

    def error_response(error: RomanizerError) -> JSONResponse:
        return JSONResponse(
            status_code=error.status_code, content=assembler.error(error)
        )

    @app.exception_handler(RomanizerError)
    async def handle_romanizer_error(request: Request, exc: RomanizerError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path}: {exc.message}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        problems = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        error = InvalidInputError("Invalid request body", errors=problems)
        return error_response(error)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        error = RomanizerError(str(exc.detail))
        error.status_code = exc.status_code
        error.kind = "MethodNotAllowed" if exc.status_code == 405 else "HTTPError"
        return JSONResponse(
            status_code=exc.status_code,
            content=assembler.error(error),
            headers=getattr(exc, "headers", None),
        )

    @app.post("/romanize")
    def romanize(request: RomanizeRequest) -> Dict[str, Any]:
        return _run(
            text_pipeline.romanize,
            text=request.text,
            script=request.language,
            system=request.romanization_system,
            options=request.options,
        )

    @app.post("/music-romanize")
    def music_romanize(request: MusicRomanizeRequest) -> Dict[str, Any]:
        return _run(
            music_pipeline.romanize,
            artist=request.artist,
            title=request.title,
            script=request.language,
            system=request.romanization_system,
            platform=request.music_platform,
            options=request.options,
        )

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app
