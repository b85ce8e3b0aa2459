"""aiohttp server for mdwiki.

Application factory and route registration.
"""

import logging

from aiohttp import web

from mdwiki.api.content import create_content_routes
from mdwiki.app_keys import (
    composer_key,
    config_key,
    poller_key,
    resolver_key,
    site_config_key,
    templates_key,
)
from mdwiki.config import Config
from mdwiki.core.composer import PageComposer
from mdwiki.core.resolver import ContentResolver
from mdwiki.core.site_config import SiteConfigPoller, SiteConfigStore
from mdwiki.core.templates import TemplateCache

logger = logging.getLogger(__name__)

STATIC_PREFIX = "/_static"


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    The site configuration is loaded synchronously here; a broken file stops
    the application from being created at all.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application

    Raises:
        ConfigLoadError: If the initial site configuration can't be loaded
    """
    app = web.Application()

    site_config = SiteConfigStore.load(config.site.config_file)
    templates = TemplateCache(config.site.template_dir)

    app[config_key] = config
    app[site_config_key] = site_config
    app[templates_key] = templates
    app[resolver_key] = ContentResolver(config.site.doc_root)
    app[composer_key] = PageComposer(site_config, templates)
    app[poller_key] = SiteConfigPoller(site_config, config.site.poll_interval)

    app.on_startup.append(_start_poller)
    app.on_cleanup.append(_stop_poller)

    # Static assets (must be registered before the catch-all content route)
    static_dir = config.site.static_dir
    if static_dir.is_dir():
        app.router.add_static(STATIC_PREFIX, static_dir)
    else:
        logger.debug(f"Static directory {static_dir} not found, {STATIC_PREFIX} disabled")

    app.router.add_routes(create_content_routes())

    return app


async def _start_poller(app: web.Application) -> None:
    """Start site config polling on application startup."""
    await app[poller_key].start()


async def _stop_poller(app: web.Application) -> None:
    """Stop site config polling on application cleanup."""
    await app[poller_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
