"""Starlette application: dashboard, custom sites and one route per mounted archive."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import BaseRoute, Mount, Route
from starlette.staticfiles import StaticFiles
from starlette.templating import Jinja2Templates

from zimmount.adapters.starlette_sink import StarletteResponseSink
from zimmount.container import Container
from zimmount.core.errors import ContentSourceError
from zimmount.core.models import WebSite
from zimmount.rewrite.middleware import MountHandler

logger = logging.getLogger(__name__)

CUSTOM_SITE_PATH = "/custom-site"
STATIC_PATH = "/static"

_PACKAGE_DIR = Path(__file__).parent
_templates = Jinja2Templates(directory=str(_PACKAGE_DIR / "templates"))


def create_app(container: Container) -> Starlette:
    """Build the ASGI app serving every mount in the container's registry."""
    config = container.config
    routes: list[BaseRoute] = [
        Route("/", _dashboard, methods=["GET"], name="dashboard"),
        Mount(
            STATIC_PATH,
            app=StaticFiles(directory=str(_PACKAGE_DIR / "static")),
            name="static",
        ),
    ]

    for mount in container.registry:
        handler = MountHandler(mount, container.rewriter)
        routes.append(
            Route(
                f"{mount.url_prefix}{{path:path}}",
                _mount_endpoint(handler),
                methods=["GET", "HEAD"],
                name=f"mount:{mount.name}",
            )
        )
        logger.info("Registered handler for %r at %s", mount.name, mount.url_prefix)

    static_dir = Path(config.static_dir).expanduser()
    if static_dir.is_dir():
        routes.append(
            Mount(
                CUSTOM_SITE_PATH,
                app=StaticFiles(directory=str(static_dir), html=True),
                name="custom-site",
            )
        )
        logger.info("Serving custom sites from %s at %s/", static_dir, CUSTOM_SITE_PATH)

    app = Starlette(routes=routes)
    app.state.container = container
    return app


def _mount_endpoint(handler: MountHandler) -> Callable[[Request], Awaitable[Response]]:
    async def endpoint(request: Request) -> Response:
        sink = StarletteResponseSink()
        try:
            await run_in_threadpool(handler.handle, request.path_params["path"], sink)
        except ContentSourceError as e:
            logger.error("Error serving %s: %s", request.url.path, e)
            return PlainTextResponse("Internal Server Error", status_code=500)
        return sink.to_response()

    return endpoint


def list_web_sites(static_dir: str | Path) -> list[WebSite]:
    """List sub-directories of the static directory as custom sites."""
    root = Path(static_dir).expanduser()
    try:
        children = sorted(root.iterdir())
    except FileNotFoundError:
        return []
    except OSError as e:
        logger.warning("Could not read static websites directory %s: %s", root, e)
        return []
    return [
        WebSite(name=child.name, access_url=f"{CUSTOM_SITE_PATH}/{child.name}/")
        for child in children
        if child.is_dir()
    ]


async def _dashboard(request: Request) -> Response:
    container: Container = request.app.state.container
    config = container.config
    return _templates.TemplateResponse(
        request,
        "library.html",
        {
            "zim_entries": container.registry.entries(),
            "web_sites": list_web_sites(config.static_dir),
            "archives_dir": config.archives_dir,
            "static_dir": config.static_dir,
        },
    )
