"""Page composition.

Runs a Markdown document through the splitter, the converter and a page
template. Documents are read fresh on every call.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2
from markupsafe import Markup

from mdwiki.core.converter import render_markdown
from mdwiki.core.errors import RenderError
from mdwiki.core.frontmatter import Document, load_document
from mdwiki.core.site_config import SiteConfigStore
from mdwiki.core.templates import TemplateCache

EDIT_LINK = "?edit=1"


@dataclass
class PageContext:
    """Values exposed to page templates."""

    config: Mapping[str, Any]
    title: Markup
    content: Markup
    toc: Markup
    page: dict[str, Any]
    source_link: str
    edit_link: str

    def to_dict(self) -> dict[str, Any]:
        # Shallow: keeps the config snapshot shared, not copied
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


@dataclass
class RenderedPage:
    """A composed page ready to send."""

    html: str
    document: Document
    template_name: str


class PageComposer:
    """Builds page contexts and renders them through cached templates."""

    def __init__(self, site_config: SiteConfigStore, templates: TemplateCache) -> None:
        """Initialize composer.

        Args:
            site_config: Live site configuration
            templates: Template cache used to look up page templates
        """
        self._site_config = site_config
        self._templates = templates

    def build_context(self, document: Document, url_path: str) -> PageContext:
        """Assemble the template context for a document.

        Args:
            document: Document loaded from disk
            url_path: Request path the document was resolved from

        Returns:
            PageContext for the page template
        """
        rendered = render_markdown(document.body)
        return PageContext(
            config=self._site_config.snapshot,
            title=Markup(document.title),
            content=Markup(rendered.content),
            toc=Markup(rendered.toc),
            page=document.metadata,
            source_link=f"{url_path}.md",
            edit_link=EDIT_LINK,
        )

    def render(self, source_path: Path, url_path: str) -> RenderedPage:
        """Render a Markdown document into a full HTML page.

        Args:
            source_path: Markdown file to render
            url_path: Request path (used for the source link)

        Returns:
            RenderedPage with the final HTML

        Raises:
            OSError: If the document can't be read
            TemplateError: If the page template is missing or invalid
            RenderError: If the template fails while rendering
        """
        document = load_document(source_path)
        context = self.build_context(document, url_path)
        template = self._templates.get(document.template_name)

        try:
            html = template.render(context.to_dict())
        except jinja2.TemplateError as e:
            raise RenderError(
                f"Template {document.template_name} failed for {source_path}: {e}",
            ) from e

        return RenderedPage(
            html=html,
            document=document,
            template_name=document.template_name,
        )
