"""Content endpoint.

Serves every path under the document root: raw files, directories, rendered
Markdown documents, the editor shell, and saves posted by the editor.
"""

import logging
from email.utils import formatdate

from aiohttp import web

from mdwiki.app_keys import composer_key, resolver_key, templates_key
from mdwiki.core.errors import PersistenceError, RenderError, TemplateError
from mdwiki.core.resolver import Resolution, RouteMode
from mdwiki.core.storage import save_document

logger = logging.getLogger(__name__)

EDITOR_TEMPLATE = "_edit.html"
SAVE_OK = "1"


def create_content_routes() -> list[web.RouteDef]:
    return [
        web.route("*", "/{path:.*}", handle_content),
    ]


async def handle_content(request: web.Request) -> web.StreamResponse:
    resolver = request.app[resolver_key]
    resolution = resolver.resolve(request.path, request.query, request.method)

    match resolution.mode:
        case RouteMode.EDIT:
            return _serve_editor(request, resolution)
        case RouteMode.SAVE:
            return await _save(request, resolution)
        case RouteMode.DIRECTORY:
            logger.debug(f"Serve dir {resolution.path}")
            return web.Response()
        case RouteMode.RAW:
            logger.debug(f"Serve file {resolution.path}")
            return web.FileResponse(resolution.path)
        case RouteMode.MARKDOWN:
            return _serve_markdown(request, resolution)
        case _:
            raise web.HTTPNotFound(text="Not found")


def _serve_editor(request: web.Request, resolution: Resolution) -> web.FileResponse:
    editor_path = request.app[templates_key].template_dir / EDITOR_TEMPLATE
    logger.debug(f"Serve editor for {resolution.path}")
    if not editor_path.is_file():
        raise web.HTTPNotFound(text="Not found")
    return web.FileResponse(editor_path)


async def _save(request: web.Request, resolution: Resolution) -> web.Response:
    form = await request.post()
    content = form.get("content", "")
    if not isinstance(content, str):
        raise web.HTTPBadRequest(text="content must be a form field, not a file")

    logger.info(f"Save file in {resolution.path}")
    resolver = request.app[resolver_key]
    try:
        save_document(resolver.doc_root, resolution.path, content)
    except PersistenceError as e:
        logger.error(f"Save failed: {e}")
        raise web.HTTPInternalServerError(text="Internal error") from e

    return web.Response(text=SAVE_OK)


def _serve_markdown(request: web.Request, resolution: Resolution) -> web.Response:
    logger.debug(f"Serve md {resolution.path} {resolution.mtime}")
    composer = request.app[composer_key]

    try:
        page = composer.render(resolution.path, request.path)
    except FileNotFoundError:
        # Removed between resolve and read
        raise web.HTTPNotFound(text="Not found") from None
    except OSError as e:
        logger.error(f"Cannot read {resolution.path}: {e}")
        raise web.HTTPInternalServerError(text="Internal error") from e
    except (TemplateError, RenderError) as e:
        logger.error(str(e))
        raise web.HTTPInternalServerError(text="Internal error") from e

    logger.debug(f"Rendered {page.document.path} with template {page.template_name}")
    return web.Response(
        text=page.html,
        content_type="text/html",
        headers={"Last-Modified": formatdate(page.document.mtime, usegmt=True)},
    )
