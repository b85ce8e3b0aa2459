"""Application keys for type-safe app configuration access."""

from aiohttp import web

from mdwiki.config import Config
from mdwiki.core.composer import PageComposer
from mdwiki.core.resolver import ContentResolver
from mdwiki.core.site_config import SiteConfigPoller, SiteConfigStore
from mdwiki.core.templates import TemplateCache

config_key = web.AppKey("config", Config)
site_config_key = web.AppKey("site_config", SiteConfigStore)
poller_key = web.AppKey("poller", SiteConfigPoller)
templates_key = web.AppKey("templates", TemplateCache)
resolver_key = web.AppKey("resolver", ContentResolver)
composer_key = web.AppKey("composer", PageComposer)
