"""Exception hierarchy for the content pipeline."""


class MdwikiError(Exception):
    """Base class for all mdwiki errors."""


class ConfigLoadError(MdwikiError):
    """Site configuration file is unreadable or not a YAML mapping."""


class TemplateError(MdwikiError):
    """Named template is missing or fails to compile."""


class TemplateNotFoundError(TemplateError):
    """Named template has no readable source file."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Template not found: {name}")
        self.name = name


class PersistenceError(MdwikiError):
    """Saving a posted document to disk failed."""


class RenderError(MdwikiError):
    """Template execution failed for a given page context."""
