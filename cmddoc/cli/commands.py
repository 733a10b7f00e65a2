"""CLI commands for the Command Documentation Generator.

Provides the Click-based command group 'cmddoc' with subcommands for
writing a documentation tree, printing a single command page and
listing the bundled templates.
"""

import io
import logging
from pathlib import Path
from typing import Optional

import click
from jinja2 import Template, TemplateNotFound, TemplateSyntaxError

from cmddoc import __version__
from cmddoc.generators.template_manager import TemplateManager, TemplateRenderError
from cmddoc.output.markdown import (
    MarkdownWriter,
    empty_prepender,
    front_matter_prepender,
    gen_markdown_custom,
    gen_markdown_custom_template,
    make_link_handler,
)
from cmddoc.tree.click_adapter import CommandLoadError, from_click, load_command
from cmddoc.tree.command import CommandNode
from cmddoc.utils.config import LINK_STYLES, AppConfig, load_config
from cmddoc.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _load_tree(target: str) -> CommandNode:
    """Load the click command named by target and convert it.

    Args:
        target: A 'package.module:attribute' string.

    Returns:
        The root CommandNode of the converted tree.
    """
    try:
        command = load_command(target)
    except CommandLoadError as e:
        raise click.ClickException(str(e)) from e
    return from_click(command)


def _resolve_template(manager: TemplateManager, template_ref: str) -> Template:
    """Load a template from a file path, or by name from the templates directory."""
    try:
        if Path(template_ref).is_file():
            return manager.load_file(template_ref)
        return manager.get_template(template_ref)
    except TemplateNotFound as e:
        raise click.ClickException(f"Template not found: {template_ref}") from e
    except TemplateSyntaxError as e:
        raise click.ClickException(f"Invalid template {template_ref}: {e}") from e
    except UnicodeDecodeError as e:
        raise click.ClickException(f"Template {template_ref} is not valid UTF-8: {e}") from e


@click.group()
@click.version_option(version=__version__, prog_name="cmddoc")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a YAML config file.",
)
@click.pass_context
def cmddoc(ctx: click.Context, config_path: Optional[str]) -> None:
    """Command Documentation Generator: Markdown pages for CLI command trees."""
    config = load_config(config_path)
    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
    )
    ctx.obj = config


@cmddoc.command(
    epilog="cmddoc generate myapp.cli:main --output-dir docs/cli --front-matter"
)
@click.argument("target")
@click.option(
    "--output-dir", type=click.Path(file_okay=False), default=None, help="Output directory."
)
@click.option(
    "--template",
    "template_ref",
    default=None,
    help="Template file, or the name of a bundled template.",
)
@click.option(
    "--link-style",
    type=click.Choice(LINK_STYLES),
    default=None,
    help="How links between pages are written.",
)
@click.option("--base-url", default=None, help="Base URL for the 'url' link style.")
@click.option(
    "--front-matter", is_flag=True, help="Prepend YAML front matter to every page."
)
@click.pass_obj
def generate(
    config: AppConfig,
    target: str,
    output_dir: Optional[str],
    template_ref: Optional[str],
    link_style: Optional[str],
    base_url: Optional[str],
    front_matter: bool,
) -> None:
    """Generate one Markdown page per command of a click application.

    TARGET names the application's root command as
    'package.module:attribute'. Hidden and deprecated commands are
    skipped.
    """
    root = _load_tree(target)
    out_dir = output_dir or config.output.output_dir
    logger.info("Generating pages for %s into %s", root.command_path(), out_dir)

    link_handler = make_link_handler(
        link_style or config.output.link_style,
        base_url if base_url is not None else config.output.base_url,
    )
    prepender = (
        front_matter_prepender
        if front_matter or config.output.front_matter
        else empty_prepender
    )

    manager = None
    template = None
    if template_ref:
        manager = TemplateManager(
            templates_dir=config.templates.templates_dir,
            strict=config.templates.strict,
        )
        template = _resolve_template(manager, template_ref)

    writer = MarkdownWriter(
        output_dir=out_dir,
        file_prepender=prepender,
        link_handler=link_handler,
        tool_name=config.output.tool_name,
        template=template,
        manager=manager,
    )
    try:
        written = writer.write_tree(root)
    except (OSError, TemplateRenderError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Wrote {len(written)} pages to {out_dir}")


@cmddoc.command()
@click.argument("target")
@click.option(
    "--command",
    "command_path",
    default="",
    help="Subcommand path below TARGET, e.g. 'remote add'.",
)
@click.option(
    "--template",
    "template_ref",
    default=None,
    help="Template file, or the name of a bundled template.",
)
@click.pass_obj
def show(
    config: AppConfig,
    target: str,
    command_path: str,
    template_ref: Optional[str],
) -> None:
    """Print the Markdown page of a single command.

    Links are rendered with the configured link style.
    """
    root = _load_tree(target)
    node = root.find(command_path)
    if node is None:
        raise click.ClickException(f"No command {command_path!r} under {root.name}")

    link_handler = make_link_handler(config.output.link_style, config.output.base_url)
    buf = io.StringIO()

    if template_ref:
        manager = TemplateManager(
            templates_dir=config.templates.templates_dir,
            strict=config.templates.strict,
        )
        template = _resolve_template(manager, template_ref)
        try:
            gen_markdown_custom_template(
                node,
                buf,
                link_handler,
                template,
                manager=manager,
                tool_name=config.output.tool_name,
            )
        except TemplateRenderError as e:
            raise click.ClickException(str(e)) from e
    else:
        gen_markdown_custom(node, buf, link_handler, tool_name=config.output.tool_name)

    click.echo(buf.getvalue(), nl=False)


@cmddoc.command()
@click.pass_obj
def templates(config: AppConfig) -> None:
    """List the bundled page templates."""
    manager = TemplateManager(templates_dir=config.templates.templates_dir)
    names = manager.list_templates()
    if not names:
        click.echo("No templates found")
        return
    for name in names:
        marker = " (default)" if name == config.templates.default_template else ""
        click.echo(f"{name}{marker}")
