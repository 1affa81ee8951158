"""InstantArt — FastAPI Application.

This module defines the FastAPI application, all REST API routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
- **Session** — one :class:`~instantart.ui.models.SessionState` per server,
  created on startup from the persisted gallery and kept on ``app.state``.
  The browser page is a thin view over it.
- **Gateway** — a :class:`~instantart.core.gateway.GenerationGateway`
  (Gemini by default) receives the credential at construction.
- **Gallery persistence** — a :class:`~instantart.core.history.GalleryStore`
  over the repository selected in configuration.
- **Relay** — ``/api/relay/*`` forwards a single request to the gateway and
  reports failures as ``{error, details}`` with the upstream status code.

Endpoints
---------
========  ==================================  ================================
Method    Path                                Purpose
========  ==================================  ================================
GET       ``/``                               Serve the main HTML page
GET       ``/api/config``                     Catalogs, defaults, session
GET       ``/api/session``                    Current session flags
PUT       ``/api/session/config``             Update generation settings
PUT       ``/api/session/mode``               Switch generate/edit
POST      ``/api/session/source-image``       Upload the edit source image
DELETE    ``/api/session/source-image``       Drop the edit source image
POST      ``/api/prompt/compile``             Preview the composed prompt
POST      ``/api/generate``                   Submit (generate or edit)
GET       ``/api/gallery``                    History and selection
DELETE    ``/api/gallery``                    Clear history
GET       ``/api/gallery/{id}``               Single gallery entry
POST      ``/api/gallery/{id}/select``        Select an entry
GET       ``/api/gallery/{id}/download``      Download image bytes
POST      ``/api/relay/generate``             Relay a generate call
POST      ``/api/relay/edit``                 Relay an edit call
========  ==================================  ================================

Usage
-----
CLI (installed entry point)::

    instantart

Direct invocation::

    python -m instantart.api.main
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from instantart import __version__
from instantart.api.models import (
    CompileRequest,
    ConfigUpdateRequest,
    ModeRequest,
    RelayEditRequest,
    RelayGenerateRequest,
    SourceImageRequest,
    SubmitRequest,
)
from instantart.core.catalog import ASPECT_RATIOS, STYLE_PRESETS
from instantart.core.config import InstantArtConfig, config
from instantart.core.errors import ConfigurationError, GenerationFailure, ValidationError
from instantart.core.gateway import GeminiGateway, GenerationGateway, detect_mime_type
from instantart.core.history import GalleryStore, HistoryRepository, create_history_repository
from instantart.core.models import GenerationConfig
from instantart.core.prompt_builder import build_prompt
from instantart.ui.handlers import (
    clear_history,
    clear_source_image,
    export_image,
    select_image,
    set_mode,
    set_source_image,
    submit_prompt,
    update_config,
)
from instantart.ui.models import SessionState
from instantart.ui.state import initialize_session

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers.
# ---------------------------------------------------------------------------


def _decode_base64_image(value: str) -> tuple[bytes, str | None]:
    """Decode base64 image text, accepting an optional ``data:`` prefix.

    Returns:
        Tuple of ``(image_bytes, mime_type_from_prefix_or_None)``.

    Raises:
        ValueError: If the payload is not valid base64 or is empty.
    """
    mime_type = None
    if value.startswith("data:"):
        header, sep, value = value.partition(",")
        if not sep:
            raise ValueError("malformed data URI")
        mime_type = header[5:].split(";")[0] or None

    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 image data: {e}") from e
    if not data:
        raise ValueError("image data is empty")
    return data, mime_type


def _session_summary(session: SessionState) -> dict:
    return {
        "mode": session.mode,
        "config": session.config.to_dict(),
        "prompt": session.prompt,
        "is_generating": session.is_generating,
        "error": session.error,
        "has_source_image": session.source_image is not None,
        "current_image_id": session.current_image_id,
    }


def _relay_error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _config_changes(req: ConfigUpdateRequest) -> dict:
    return {
        name: value
        for name, value in req.model_dump(include=set(ConfigUpdateRequest.model_fields)).items()
        if value is not None
    }


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: InstantArtConfig = config,
    *,
    gateway: GenerationGateway | None = None,
    repository: HistoryRepository | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application configuration.
        gateway: Generation gateway; defaults to a :class:`GeminiGateway`
            built from ``settings``.
        repository: Gallery snapshot repository; defaults to the backend
            selected by ``settings.history_backend``.

    Returns:
        Configured FastAPI application.  The session is created when the
        application starts (lifespan), loading the persisted gallery.
    """
    if gateway is None:
        gateway = GeminiGateway.from_config(settings)
        if not settings.has_api_key:
            logger.warning("INSTANTART_API_KEY is not set; generation requests will fail")
    if repository is None:
        repository = create_history_repository(settings)

    store = GalleryStore(repository, key=settings.history_key)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Load the gallery into a fresh session on startup."""
        app.state.session = initialize_session(store)
        yield
        logger.info("InstantArt shutting down.")

    app = FastAPI(
        title="InstantArt",
        description="Prompt-templated image generation and editing with a local gallery.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    def _session(request: Request) -> SessionState:
        return request.app.state.session

    # -- Page and configuration ---------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Serve the main application HTML page."""
        index_path = settings.templates_dir / "index.html"
        if index_path.exists():
            return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
        raise HTTPException(status_code=404, detail="index.html not found")

    @app.get("/api/config")
    async def get_config(request: Request) -> dict:
        """Return catalogs, defaults and the session's current settings.

        The credential itself is never included; only whether one is set.
        """
        session = _session(request)
        return {
            "version": __version__,
            "styles": [style.to_dict() for style in STYLE_PRESETS],
            "aspect_ratios": [ratio.to_dict() for ratio in ASPECT_RATIOS],
            "defaults": GenerationConfig().to_dict(),
            "config": session.config.to_dict(),
            "mode": session.mode,
            "has_api_key": settings.has_api_key,
        }

    # -- Session ------------------------------------------------------------

    @app.get("/api/session")
    async def get_session(request: Request) -> dict:
        """Return the session's mode, settings and flags."""
        return _session_summary(_session(request))

    @app.put("/api/session/config")
    async def put_session_config(req: ConfigUpdateRequest, request: Request) -> dict:
        """Update any subset of the generation settings."""
        session = _session(request)
        update_config(session, **_config_changes(req))
        return {"config": session.config.to_dict()}

    @app.put("/api/session/mode")
    async def put_session_mode(req: ModeRequest, request: Request) -> dict:
        """Switch the session between generate and edit mode."""
        session = _session(request)
        set_mode(session, req.mode)
        return {"mode": session.mode}

    @app.post("/api/session/source-image")
    async def post_source_image(req: SourceImageRequest, request: Request) -> dict:
        """Attach an edit source image; the session switches to edit mode."""
        session = _session(request)
        try:
            data, prefix_mime = _decode_base64_image(req.image_base64)
            set_source_image(session, data, req.mime_type or prefix_mime)
        except (ValueError, ValidationError) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {
            "mode": session.mode,
            "mime_type": session.source_mime_type,
            "size": len(data),
        }

    @app.delete("/api/session/source-image")
    async def delete_source_image(request: Request) -> dict:
        """Drop the edit source image."""
        clear_source_image(_session(request))
        return {"success": True}

    # -- Prompt and generation ----------------------------------------------

    @app.post("/api/prompt/compile")
    async def compile_prompt(req: CompileRequest, request: Request) -> dict:
        """Preview the generate-mode prompt without calling the gateway.

        Config fields in the request override the session settings for this
        preview only.
        """
        session = _session(request)
        preview_config = GenerationConfig(**{**session.config.to_dict(), **_config_changes(req)})
        return {"compiled_prompt": build_prompt(req.prompt, preview_config)}

    @app.post("/api/generate")
    async def generate(req: SubmitRequest, request: Request) -> dict:
        """Submit the prompt in the session's current mode.

        Returns:
            ``{"success": True, "image": entry}`` on success, otherwise
            ``{"success": False, "error": message}``.  The gallery is only
            changed on success.

        Raises:
            HTTPException: 409 if a request is already in flight.
        """
        session = _session(request)
        if session.is_generating:
            raise HTTPException(status_code=409, detail="A generation request is already running")

        image = await submit_prompt(session, req.prompt, store, request.app.state.gateway)
        if image is None:
            return {"success": False, "error": session.error}
        return {"success": True, "image": image.to_dict()}

    # -- Gallery ------------------------------------------------------------

    @app.get("/api/gallery")
    async def get_gallery(request: Request) -> dict:
        """Return the full history (newest first) and the current selection."""
        session = _session(request)
        return {
            "total": len(session.history),
            "current_image_id": session.current_image_id,
            "images": [entry.to_dict() for entry in session.history],
        }

    @app.delete("/api/gallery")
    async def delete_gallery(request: Request) -> dict:
        """Clear the history and remove the persisted snapshot."""
        session = _session(request)
        clear_history(session, store)
        return {"success": True, "total": 0}

    @app.get("/api/gallery/{image_id}")
    async def get_image(image_id: str, request: Request) -> dict:
        """Return a single gallery entry."""
        session = _session(request)
        entry = next((g for g in session.history if g.id == image_id), None)
        if entry is None:
            raise HTTPException(status_code=404, detail="Image not found")
        return entry.to_dict()

    @app.post("/api/gallery/{image_id}/select")
    async def post_select(image_id: str, request: Request) -> dict:
        """Select a gallery entry; unknown ids clear the selection."""
        session = _session(request)
        image = select_image(session, image_id)
        return {
            "current_image_id": session.current_image_id,
            "image": image.to_dict() if image else None,
        }

    @app.get("/api/gallery/{image_id}/download")
    async def download_image(image_id: str, request: Request) -> Response:
        """Return the image bytes as an attachment."""
        session = _session(request)
        entry = next((g for g in session.history if g.id == image_id), None)
        if entry is None:
            raise HTTPException(status_code=404, detail="Image not found")
        try:
            data, mime_type, filename = export_image(entry)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return Response(
            content=data,
            media_type=mime_type,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    # -- Relay --------------------------------------------------------------

    @app.post("/api/relay/generate")
    async def relay_generate(req: RelayGenerateRequest, request: Request) -> JSONResponse:
        """Forward a composed prompt to the gateway and return the image."""
        if not req.prompt:
            return _relay_error(400, "Prompt missing")
        return await _relay(request.app.state.gateway.generate, req.prompt)

    @app.post("/api/relay/edit")
    async def relay_edit(req: RelayEditRequest, request: Request) -> JSONResponse:
        """Forward an image and raw instruction to the gateway."""
        if not req.prompt:
            return _relay_error(400, "Prompt missing")
        if not req.image_base64:
            return _relay_error(400, "Image missing")
        try:
            data, prefix_mime = _decode_base64_image(req.image_base64)
        except ValueError as e:
            return _relay_error(400, "Invalid image", str(e))
        return await _relay(
            request.app.state.gateway.edit, data, req.prompt, prefix_mime or req.mime_type
        )

    return app


async def _relay(call, *args) -> JSONResponse:
    """Run one gateway call for the relay routes and shape the response."""
    try:
        data = await asyncio.to_thread(call, *args)
    except ConfigurationError:
        logger.error("Relay call rejected: API key missing on server")
        return _relay_error(500, "API key missing on server")
    except GenerationFailure as e:
        return _relay_error(e.status_code or 502, str(e), e.details)
    except Exception as e:
        logger.error(f"Relay call failed: {e}", exc_info=True)
        return _relay_error(500, "Server error", str(e))

    return JSONResponse(
        content={
            "image_base64": base64.b64encode(data).decode("ascii"),
            "mime_type": detect_mime_type(data),
        }
    )


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~instantart.core.config.config`
    (``INSTANTART_SERVER_HOST``, ``INSTANTART_SERVER_PORT``,
    ``INSTANTART_LOG_LEVEL``).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``instantart`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "instantart.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
