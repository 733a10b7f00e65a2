"""Template manager for rendering command pages with Jinja2.

Loads templates from a templates directory, a file path, or a string,
and renders them against a RenderableCommand. Rendering is best
effort by default: a failing template is logged and whatever output
it produced up to the failure is kept.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from cmddoc.generators.extractor import RenderableCommand

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class TemplateRenderError(RuntimeError):
    """Raised by a strict TemplateManager when a template fails to execute."""


def header(scale: int) -> str:
    """Heading marker for a command at the given depth; ``#`` for the root."""
    return "#" * (scale + 1)


def sub_header(scale: int) -> str:
    """Heading marker one level below ``header(scale)``."""
    return "#" * (scale + 2)


class TemplateManager:
    """Loads Jinja2 templates and renders command records with them.

    Every RenderableCommand field is exposed to templates under its
    own name. ``header`` and ``sub_header`` are registered as global
    helpers; callers may add more with ``register_helper``.
    """

    def __init__(self, templates_dir: Optional[str] = None, strict: bool = False) -> None:
        """Initialize the template manager.

        Args:
            templates_dir: Path to the templates directory. Uses the
                bundled cmddoc/templates/ directory if not specified.
            strict: Raise TemplateRenderError on template failures
                instead of logging them and keeping partial output.
        """
        self._templates_path = (
            Path(templates_dir) if templates_dir else _DEFAULT_TEMPLATES_DIR
        )
        self.strict = strict

        if not self._templates_path.exists():
            logger.warning("Templates directory not found: %s", self._templates_path)

        self._env = Environment(
            loader=FileSystemLoader(str(self._templates_path)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.globals.update(header=header, sub_header=sub_header)
        logger.debug("Template manager initialized with: %s", self._templates_path)

    def register_helper(self, name: str, func: Callable[..., Any]) -> None:
        """Expose a callable to templates as a global function."""
        self._env.globals[name] = func

    def get_template(self, name: str) -> Template:
        """Load a template by name from the templates directory.

        Raises:
            TemplateNotFound: If the template file does not exist.
        """
        return self._env.get_template(name)

    def from_string(self, source: str) -> Template:
        return self._env.from_string(source)

    def load_file(self, path: str) -> Template:
        """Load a template from an arbitrary file path.

        Raises:
            FileNotFoundError: If the file does not exist.
            TemplateSyntaxError: If the file is not a valid template.
        """
        source = Path(path).read_text(encoding="utf-8")
        logger.debug("Loaded template file %s", path)
        return self._env.from_string(source)

    def list_templates(self) -> list[str]:
        """List all available template files.

        Returns:
            List of template file names.
        """
        return self._env.list_templates()

    def render_command(self, command: RenderableCommand, template: Template) -> str:
        """Render a command record through a template.

        Args:
            command: The record to expose as template context.
            template: The template to execute.

        Returns:
            The rendered text. When the template fails and the manager is
            not strict, the output produced before the failure.

        Raises:
            TemplateRenderError: If the template fails and the manager
                is strict.
        """
        chunks: list[str] = []
        template_name = template.name or "<string>"
        try:
            for chunk in template.generate(**command.to_dict()):
                chunks.append(chunk)
        except Exception as e:
            # Jinja2 re-raises errors from filters, operators and helpers as-is
            reason = f"{type(e).__name__}: {e}"
            if self.strict:
                raise TemplateRenderError(
                    f"executing template {template_name}: {reason}"
                ) from e
            logger.error("executing template %s: %s", template_name, reason)

        rendered = "".join(chunks)
        logger.debug(
            "Rendered %s with %s (%d chars)", command.name, template_name, len(rendered)
        )
        return rendered
