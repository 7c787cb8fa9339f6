"""FastAPI application bridging a browser rich-text surface and the vault."""

import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..errors import DocumentNotFound
from ..tags import recognize_tag, segment_dict
from ..transcode import to_host, to_rich


class TextPayload(BaseModel):
    text: str


class TagRequest(BaseModel):
    text: str
    caret: int
    inside_link: bool = False


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with vault store and options
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="richnote API",
        description="Dialect transcoding for a rich-text note editor",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get("/ui")
    async def ui_settings(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Theme values for the rendering surface."""
        return {"dark": runtime.config.ui.dark}

    @app.post("/transcode/to-rich")
    async def transcode_to_rich(payload: TextPayload, auth: None = Depends(verify_token)) -> dict[str, Any]:
        return {"text": to_rich(payload.text, runtime.options)}

    @app.post("/transcode/to-host")
    async def transcode_to_host(payload: TextPayload, auth: None = Depends(verify_token)) -> dict[str, Any]:
        return {"text": to_host(payload.text, runtime.options)}

    @app.post("/tags/recognize")
    async def tags_recognize(req: TagRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Compute the tag edit for a trigger typed at ``caret``."""
        edit = recognize_tag(req.text, req.caret, inside_link=req.inside_link)
        if edit is None:
            return {"handled": False}
        return {
            "handled": True,
            "segments": [segment_dict(seg) for seg in edit.segments],
            "caret": {"segment": edit.caret_segment, "offset": edit.caret_offset},
        }

    @app.get("/notes/{path:path}")
    async def get_note(path: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get a host note in rich dialect."""
        session = runtime.session(path)
        try:
            rich = session.load()
        except DocumentNotFound as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"path": path, "title": session.title, "text": rich}

    @app.put("/notes/{path:path}")
    async def put_note(
        path: str,
        payload: TextPayload = Body(...),  # noqa: B008
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Store rich-dialect text as a host note."""
        session = runtime.session(path)
        try:
            host = session.on_change(payload.text)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"path": path, "text": host}

    return app
