"""Extraction of render-ready records from command nodes.

A RenderableCommand is the flat view of one CommandNode that both the
fixed Markdown layout and user templates consume. It is built fresh
for each render and never mutated afterwards.
"""

import logging
import re
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Callable, Optional

from cmddoc.tree.command import CommandNode

logger = logging.getLogger(__name__)

LinkHandler = Callable[[str], str]

# Clips the leading '-' of every flag after the first.
_FLAG_SPLITTER = re.compile(r"\n *-")

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class RenderableCommand:
    """Flattened, render-ready view of one command.

    Attributes:
        name: Full command path from the root.
        short: Short description.
        long: Long description, or the short one when empty.
        use_line: Usage line including parent commands.
        example: Example text; empty means no examples section.
        flags: Formatted block of the command's own flags.
        flag_slice: ``flags`` split into one entry per flag.
        parent_flags: Formatted block of inherited flags.
        parent_link: Link line to the parent command.
        children_links: Link lines to visible children, sorted by name.
        related_links: Link lines to visible related commands.
        command_link: Resolved link to this command's own page.
        header_scale: Depth of the command; 0 for the root.
        auto_gen_tag: Generated-by footer text; empty when suppressed.
        runnable: Whether the command can be run.
    """

    name: str
    short: str = ""
    long: str = ""
    use_line: str = ""
    example: str = ""
    flags: str = ""
    flag_slice: tuple[str, ...] = ()
    parent_flags: str = ""
    parent_link: str = ""
    children_links: tuple[str, ...] = ()
    related_links: tuple[str, ...] = ()
    command_link: str = ""
    header_scale: int = 0
    auto_gen_tag: str = ""
    runnable: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary, suitable as a template context."""
        return asdict(self)


def identity_link(name: str) -> str:
    return name


def doc_basename(command_path: str) -> str:
    """Canonical page file name for a command path."""
    return command_path.replace(" ", "_") + ".md"


def link_line(command_path: str, link_handler: LinkHandler, short: str) -> str:
    """Render one ``* [path](link)\\t - short`` list entry."""
    return f"* [{command_path}]({link_handler(doc_basename(command_path))})\t - {short}\n"


def format_date(day: date) -> str:
    """Format a date as day-Mon-YYYY without a leading zero."""
    return f"{day.day}-{_MONTHS[day.month - 1]}-{day.year:04d}"


def split_flags(flags: str) -> list[str]:
    """Split a formatted flag block into one entry per flag.

    The block is cut on newline, indent, dash boundaries, at most as
    many pieces as there are ``--`` markers in the text. The dash that
    the split clips is put back on every piece after the first, and a
    trailing empty piece is dropped. A default value that itself
    contains the boundary yields a degenerate split.

    Args:
        flags: Output of the flag printer.

    Returns:
        List of per-flag entries; empty when there are no flags.
    """
    count = flags.count("--")
    if count == 0:
        return []
    if count == 1:
        pieces = [flags]
    else:
        pieces = _FLAG_SPLITTER.split(flags, maxsplit=count - 1)
    if pieces and pieces[-1] == "":
        pieces = pieces[:-1]
    return [piece if i == 0 else "-" + piece for i, piece in enumerate(pieces)]


def _is_listed(command: CommandNode) -> bool:
    return command.is_available_command() and not command.is_additional_help_topic_command()


def extract(
    command: CommandNode,
    link_handler: LinkHandler = identity_link,
    tool_name: str = "cmddoc",
    today: Optional[date] = None,
) -> RenderableCommand:
    """Build the render-ready record for a command.

    Args:
        command: The command to describe.
        link_handler: Maps a canonical page file name to the link that
            should appear in the output.
        tool_name: Name shown in the generated-by footer.
        today: Date shown in the footer; defaults to the current date.

    Returns:
        A new RenderableCommand.
    """
    name = command.command_path()
    long = command.long or command.short

    own_flags = command.non_inherited_flags()
    flags = own_flags.format_defaults() if own_flags.has_available_flags() else ""

    inherited = command.inherited_flags()
    parent_flags = inherited.format_defaults() if inherited.has_available_flags() else ""

    parent_link = ""
    if command.parent is not None:
        parent = command.parent
        parent_link = link_line(parent.command_path(), link_handler, parent.short)

    children_links = tuple(
        link_line(f"{name} {child.name}", link_handler, child.short)
        for child in command.sorted_children()
        if _is_listed(child)
    )

    related_links = tuple(
        link_line(related.command_path(), link_handler, related.short)
        for related in command.related
        if _is_listed(related)
    )

    auto_gen_tag = ""
    if not command.auto_gen_tag_disabled():
        auto_gen_tag = f"Auto generated by {tool_name} on {format_date(today or date.today())}"

    logger.debug(
        "Extracted %s: %d children, %d related",
        name,
        len(children_links),
        len(related_links),
    )
    return RenderableCommand(
        name=name,
        short=command.short,
        long=long,
        use_line=command.use_line(),
        example=command.example,
        flags=flags,
        flag_slice=tuple(split_flags(flags)),
        parent_flags=parent_flags,
        parent_link=parent_link,
        children_links=children_links,
        related_links=related_links,
        command_link=link_handler(doc_basename(name)),
        header_scale=command.depth(),
        auto_gen_tag=auto_gen_tag,
        runnable=command.runnable,
    )
