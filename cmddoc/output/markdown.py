"""Markdown output for command documentation.

Renders one command page with the fixed layout or a template, writes
it to a stream, and materializes a whole command tree as one Markdown
file per command.
"""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Callable, Optional, TextIO

from jinja2 import Template

from cmddoc.generators.extractor import (
    LinkHandler,
    RenderableCommand,
    doc_basename,
    extract,
    identity_link,
)
from cmddoc.generators.template_manager import TemplateManager
from cmddoc.tree.command import CommandNode

logger = logging.getLogger(__name__)

FilePrepender = Callable[[str], str]


def empty_prepender(filename: str) -> str:
    return ""


def front_matter_prepender(filename: str) -> str:
    """YAML front matter naming the command the page documents.

    Args:
        filename: Path of the page being written.

    Returns:
        A ``---`` delimited block with the page title and slug.
    """
    base = os.path.splitext(os.path.basename(filename))[0]
    title = base.replace("_", " ")
    return f'---\ntitle: "{title}"\nslug: {base.lower()}\n---\n\n'


def anchor_link(name: str) -> str:
    """Link to an in-page anchor, e.g. ``root_echo.md`` -> ``#root-echo``."""
    base = os.path.splitext(name)[0]
    return "#" + base.replace("_", "-")


def make_link_handler(style: str = "file", base_url: str = "") -> LinkHandler:
    """Build a link handler for a link style.

    Args:
        style: ``file`` keeps the page file name, ``anchor`` links to an
            in-page anchor, ``url`` joins the file name (without its
            extension) onto ``base_url``.
        base_url: Prefix for the ``url`` style.

    Returns:
        A function mapping a page file name to a link.

    Raises:
        ValueError: If the style is unknown.
    """
    if style == "file":
        return identity_link
    if style == "anchor":
        return anchor_link
    if style == "url":
        prefix = base_url.rstrip("/")

        def url_link(name: str) -> str:
            return f"{prefix}/{os.path.splitext(name)[0].lower()}/"

        return url_link
    raise ValueError(f"Unknown link style: {style}")


def _print_options(lines: list[str], command: RenderableCommand) -> None:
    if command.flags:
        lines.append(f"### Options\n\n```\n{command.flags}```\n\n")
    if command.parent_flags:
        lines.append(
            f"### Options inherited from parent commands\n\n```\n{command.parent_flags}```\n\n"
        )


def render_markdown(command: RenderableCommand) -> str:
    """Render a command record with the fixed Markdown layout.

    Sections appear in a fixed order: title, short description,
    synopsis, usage block, examples, own options, inherited options,
    see-also links and the generated-by footer. Empty sections are
    left out.

    Args:
        command: The record to render.

    Returns:
        The Markdown page.
    """
    lines = [
        f"## {command.name}\n\n",
        f"{command.short}\n\n",
        "### Synopsis\n\n",
        f"{command.long}\n\n",
    ]

    if command.runnable and command.use_line:
        lines.append(f"```\n{command.use_line}\n```\n\n")

    if command.example:
        lines.append("### Examples\n\n")
        lines.append(f"```\n{command.example}\n```\n\n")

    _print_options(lines, command)

    if command.parent_link or command.children_links:
        lines.append("### SEE ALSO\n\n")
        lines.append(command.parent_link)
        lines.extend(command.children_links)
        lines.append("\n")

    if command.auto_gen_tag:
        lines.append(f"###### {command.auto_gen_tag}\n")

    return "".join(lines)


def gen_markdown_custom(
    command: CommandNode,
    stream: TextIO,
    link_handler: LinkHandler = identity_link,
    tool_name: str = "cmddoc",
    today: Optional[date] = None,
) -> None:
    """Write a command's fixed-layout page to a stream.

    Args:
        command: The command to document.
        stream: Text stream to write to.
        link_handler: Maps page file names to links.
        tool_name: Name shown in the generated-by footer.
        today: Date shown in the footer; defaults to the current date.
    """
    command.init_default_help_flag()
    record = extract(command, link_handler, tool_name=tool_name, today=today)
    stream.write(render_markdown(record))


def gen_markdown(command: CommandNode, stream: TextIO) -> None:
    gen_markdown_custom(command, stream, identity_link)


def gen_markdown_custom_template(
    command: CommandNode,
    stream: TextIO,
    link_handler: LinkHandler,
    template: Template,
    manager: Optional[TemplateManager] = None,
    tool_name: str = "cmddoc",
    today: Optional[date] = None,
) -> None:
    """Write a command's page rendered through a template to a stream.

    The fixed footer is never appended here; templates render
    ``auto_gen_tag`` themselves if they want one.

    Args:
        command: The command to document.
        stream: Text stream to write to.
        link_handler: Maps page file names to links.
        template: The template to execute.
        manager: Template manager that executes the template; a default
            best-effort manager is used if not given.
        tool_name: Name shown in the generated-by footer text.
        today: Date used in the footer text.

    Raises:
        TemplateRenderError: If the manager is strict and the template fails.
    """
    command.init_default_help_flag()
    record = extract(command, link_handler, tool_name=tool_name, today=today)
    renderer = manager or TemplateManager()
    stream.write(renderer.render_command(record, template))


class MarkdownWriter:
    """Writes one Markdown page per command of a command tree.

    Pages are named after the command path with spaces replaced by
    underscores. Two paths that collapse to the same name overwrite
    each other; the last one written wins.
    """

    def __init__(
        self,
        output_dir: str = "docs/commands",
        file_prepender: FilePrepender = empty_prepender,
        link_handler: LinkHandler = identity_link,
        tool_name: str = "cmddoc",
        template: Optional[Template] = None,
        manager: Optional[TemplateManager] = None,
    ) -> None:
        """Initialize the Markdown writer.

        Args:
            output_dir: Directory where pages will be written.
            file_prepender: Produces text written at the top of each page
                from the page's path.
            link_handler: Maps page file names to links.
            tool_name: Name shown in the generated-by footer.
            template: Optional template used instead of the fixed layout.
            manager: Template manager executing ``template``.
        """
        self.output_dir = Path(output_dir)
        self.file_prepender = file_prepender
        self.link_handler = link_handler
        self.tool_name = tool_name
        self.template = template
        if manager is None and template is not None:
            manager = TemplateManager()
        self.manager = manager

    def write_tree(self, command: CommandNode, today: Optional[date] = None) -> list[Path]:
        """Write pages for a command and all its visible descendants.

        Children are written before their parent, siblings in name
        order. Unavailable and
        help-topic children are skipped along with their subtrees. Any
        error creating or writing a file aborts the walk.

        Args:
            command: Root of the tree to document.
            today: Date shown in footers; defaults to the current date.

        Returns:
            Paths of the written pages, in write order.

        Raises:
            OSError: If a page cannot be created or written.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        self._write_subtree(command, written, today)
        logger.info("Wrote %d command pages to %s", len(written), self.output_dir)
        return written

    def _write_subtree(
        self, command: CommandNode, written: list[Path], today: Optional[date]
    ) -> None:
        for child in command.sorted_children():
            if not child.is_available_command() or child.is_additional_help_topic_command():
                continue
            self._write_subtree(child, written, today)

        path = self.output_dir / doc_basename(command.command_path())
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.file_prepender(str(path)))
            if self.template is not None:
                gen_markdown_custom_template(
                    command,
                    f,
                    self.link_handler,
                    self.template,
                    manager=self.manager,
                    tool_name=self.tool_name,
                    today=today,
                )
            else:
                gen_markdown_custom(
                    command, f, self.link_handler, tool_name=self.tool_name, today=today
                )

        logger.debug("Wrote command page: %s", path)
        written.append(path)


def gen_markdown_tree(command: CommandNode, output_dir: str) -> list[Path]:
    """Write fixed-layout pages for a whole tree with default settings."""
    return MarkdownWriter(output_dir=output_dir).write_tree(command)


def gen_markdown_tree_custom(
    command: CommandNode,
    output_dir: str,
    file_prepender: FilePrepender,
    link_handler: LinkHandler,
) -> list[Path]:
    return MarkdownWriter(
        output_dir=output_dir,
        file_prepender=file_prepender,
        link_handler=link_handler,
    ).write_tree(command)
