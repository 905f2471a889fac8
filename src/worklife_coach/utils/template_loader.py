"""
Jinja2-based response template loading and rendering.

Coaching responses are assembled from small text templates shipped in the
package's templates/ directory. Templates support the usual Jinja2 features
(variables, conditionals, loops) plus a `percent` filter for 0-1 scores.

Usage:
    from worklife_coach.utils.template_loader import render_template

    text = render_template("career_paths.j2", paths=paths)
"""

from pathlib import Path
from typing import Any, Optional

import structlog
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def percent(value: float) -> str:
    """Format a 0-1 score as a whole percentage, e.g. 0.847 -> '85%'."""
    return f"{round(value * 100)}%"


class TemplateLoader:
    """
    Manages loading and rendering of Jinja2 response templates.

    Templates are loaded from worklife_coach/templates/ unless another
    directory is given.
    """

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        strict_undefined: bool = True,
    ) -> None:
        """
        Initialize TemplateLoader with a Jinja2 environment.

        Args:
            template_dir: Base directory for templates (defaults to the package templates/)
            strict_undefined: If True, raise error for undefined variables (default: True)
        """
        self.template_dir = template_dir or DEFAULT_TEMPLATE_DIR
        self.strict_undefined = strict_undefined

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,  # Responses are markdown text, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined if strict_undefined else Undefined,
        )
        self.env.filters["percent"] = percent

        logger.debug(
            "template_loader_initialized",
            template_dir=str(self.template_dir),
            strict_undefined=strict_undefined,
        )

    def render(
        self,
        template_name: str,
        correlation_id: Optional[str] = None,
        **variables: Any,
    ) -> str:
        """
        Render a template with provided variables.

        Args:
            template_name: Path relative to the template directory (e.g. "skills.j2")
            correlation_id: Optional correlation ID for logging
            **variables: Template variables as keyword arguments

        Returns:
            Rendered text with surrounding whitespace stripped

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has syntax errors
            UndefinedError: If strict_undefined=True and a variable is missing
        """
        log = logger.bind(template_name=template_name, correlation_id=correlation_id)

        try:
            template = self.env.get_template(template_name)
            rendered = template.render(**variables).strip()
            log.debug("template_rendered", rendered_length=len(rendered))
            return rendered

        except TemplateNotFound as e:
            log.error(
                "template_not_found",
                template_dir=str(self.template_dir),
                error=str(e),
            )
            raise

        except TemplateSyntaxError as e:
            log.error("template_syntax_error", error=str(e), lineno=e.lineno)
            raise

        except UndefinedError as e:
            log.error(
                "template_variable_undefined",
                error=str(e),
                variables_provided=list(variables.keys()),
            )
            raise


_default_loader: Optional[TemplateLoader] = None


def get_default_loader() -> TemplateLoader:
    """Get or create the shared TemplateLoader instance."""
    global _default_loader
    if _default_loader is None:
        _default_loader = TemplateLoader()
    return _default_loader


def render_template(
    template_name: str,
    correlation_id: Optional[str] = None,
    **variables: Any,
) -> str:
    """Render a package template with the default loader."""
    loader = get_default_loader()
    return loader.render(template_name, correlation_id=correlation_id, **variables)
