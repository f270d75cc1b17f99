"""Arboretum Web Visualizer - FastAPI Backend.

This module serves the syntax tree visualizer: a JSON API around the
parse session and an HTML page that draws the current tree.

Usage:
    uvicorn arboretum.visualizer.server:app --reload

Or run directly:
    python -m arboretum.visualizer.server
"""

from __future__ import annotations

import html
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from arboretum.config import settings
from arboretum.errors import RequestInFlightError
from arboretum.layout import Viewport
from arboretum.metrics import calculate_stats
from arboretum.parser import SyntaxParser
from arboretum.render import PAN_ZOOM_SCRIPT, render_scene, scene_to_svg
from arboretum.session import ParseSession, SessionState
from arboretum.visualization import to_bracket_notation

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# HTTP status per error kind; anything unlisted came from the model service.
ERROR_STATUS = {
    "CredentialMissing": 401,
    "CredentialRejected": 401,
    "RequestInFlight": 409,
}


class ParseRequest(BaseModel):
    sentence: str


class CredentialsRequest(BaseModel):
    api_key: str


# Global session (single user, single current result)
session = ParseSession(SyntaxParser(settings))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Arboretum Visualizer starting...")
    if not session.parser.has_credentials:
        logger.warning("No API key configured; parse requests will be refused")
    yield
    logger.info("Arboretum Visualizer shutting down...")


app = FastAPI(
    title="Arboretum Visualizer",
    description="X-bar syntax tree visualization",
    version="0.1.0",
    lifespan=lifespan,
)


def _state_response(state: SessionState) -> JSONResponse:
    if state.error is None:
        return JSONResponse(content=state.to_dict())
    status = ERROR_STATUS.get(state.error.kind, 502)
    return JSONResponse(status_code=status, content=state.to_dict())


def _viewport(width: int | None, height: int | None) -> Viewport:
    return Viewport(
        width=width or settings.viewport_width,
        height=height or settings.viewport_height,
    )


def _current_result():
    result = session.state.result
    if result is None:
        raise HTTPException(status_code=404, detail="No tree loaded")
    return result


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "has_tree": session.state.result is not None,
        "loading": session.state.loading,
        "has_credentials": session.parser.has_credentials,
    }


@app.post("/api/parse")
async def parse_sentence(payload: ParseRequest):
    """Parse a sentence and make it the current tree."""
    try:
        state = await session.submit(payload.sentence)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RequestInFlightError as exc:
        return JSONResponse(status_code=409, content={"error": exc.to_dict()})
    return _state_response(state)


@app.post("/api/credentials")
async def update_credentials(payload: CredentialsRequest):
    """Replace the API key for this session (never persisted)."""
    api_key = payload.api_key.strip()
    if not api_key:
        raise HTTPException(status_code=422, detail="api_key must not be blank")
    session.parser.update_credentials(api_key)
    if session.state.needs_credentials:
        session.clear()
    return {"status": "updated", "has_credentials": True}


@app.get("/api/tree")
async def get_tree():
    """Get the current session state."""
    return session.state.to_dict()


@app.delete("/api/tree")
async def clear_tree():
    """Discard the current tree."""
    session.clear()
    return {"status": "cleared"}


@app.get("/api/tree/stats")
async def get_stats():
    """Get statistics for the current tree."""
    return calculate_stats(_current_result().tree)


@app.get("/api/tree/scene")
async def get_scene(
    animated: bool = False,
    width: int | None = Query(default=None, gt=0),
    height: int | None = Query(default=None, gt=0),
):
    """Get the laid-out scene for the current tree as JSON."""
    scene = render_scene(_current_result().tree, animated, _viewport(width, height))
    return scene.to_dict()


@app.get("/api/tree/svg")
async def get_svg(
    animated: bool = False,
    width: int | None = Query(default=None, gt=0),
    height: int | None = Query(default=None, gt=0),
):
    """Get the current tree as an SVG document."""
    scene = render_scene(_current_result().tree, animated, _viewport(width, height))
    return Response(content=scene_to_svg(scene), media_type="image/svg+xml")


@app.get("/", response_class=HTMLResponse)
async def index(view: str = "tree"):
    """Serve the main visualizer page."""
    return HTMLResponse(content=render_index(session.state, view))


def render_index(state: SessionState, view: str = "tree") -> str:
    """Build the visualizer page for a session state."""
    sections: list[str] = []

    if state.error is not None:
        sections.append(
            f'<div class="status error">{html.escape(state.error.message)}</div>'
        )
    if state.needs_credentials:
        sections.append("""
    <form id="credentials" class="status">
        <input type="password" name="api_key" placeholder="API key">
        <button type="submit">Renew credentials</button>
    </form>""")

    result = state.result
    if result is not None:
        stats = calculate_stats(result.tree)
        animated = view == "growth"
        scene = render_scene(result.tree, animated, _viewport(None, None))
        pos_rows = "".join(
            f"<tr><td>{html.escape(p.word)}</td><td>{html.escape(p.pos)}</td></tr>"
            for p in result.parts_of_speech
        )
        sections.append(f"""
    <nav>
        <a href="/?view=tree">Tree</a> | <a href="/?view=growth">Growth</a>
    </nav>
    <div class="canvas">{scene_to_svg(scene)}</div>
    <p class="brackets">{html.escape(to_bracket_notation(result.tree))}</p>
    <blockquote>{html.escape(result.explanation)}</blockquote>
    <table class="pos">{pos_rows}</table>
    <p class="stats">Depth: {stats["layers"]} layers |
        Nodes: {stats["node_count"]} | Complexity: {stats["complexity"]}</p>""")

    sentence = html.escape(state.sentence or "The farmer eats the pig", quote=True)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Arboretum Visualizer</title>
    <style>
        body {{ font-family: system-ui, sans-serif; padding: 20px; }}
        .status {{ padding: 10px; border-radius: 4px; margin: 10px 0; }}
        .error {{ background: #fee2e2; color: #991b1b; }}
        .canvas {{ height: 70vh; overflow: hidden; background: #0b1410; }}
    </style>
</head>
<body>
    <h1>Arboretum Visualizer</h1>
    <form id="parse">
        <input name="sentence" size="60" value="{sentence}">
        <button type="submit">Parse</button>
    </form>
    {"".join(sections)}
    <script>
    async function post(url, body) {{
        document.querySelectorAll("button").forEach((b) => b.disabled = true);
        await fetch(url, {{
            method: "POST",
            headers: {{"Content-Type": "application/json"}},
            body: JSON.stringify(body),
        }});
        location.reload();
    }}
    document.getElementById("parse").addEventListener("submit", (e) => {{
        e.preventDefault();
        post("/api/parse", {{sentence: e.target.sentence.value}});
    }});
    const creds = document.getElementById("credentials");
    if (creds) creds.addEventListener("submit", (e) => {{
        e.preventDefault();
        post("/api/credentials", {{api_key: e.target.api_key.value}});
    }});
    </script>
    <script>{PAN_ZOOM_SCRIPT}</script>
</body>
</html>
"""


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
