"""Build a CommandNode tree from a Click command.

Introspects click groups and commands through a click Context and
maps options to flags and arguments to the use string.
"""

import importlib
import logging
from typing import Any, Optional

import click

from cmddoc.tree.command import CommandNode
from cmddoc.tree.flags import Flag, FlagType

logger = logging.getLogger(__name__)


class CommandLoadError(ValueError):
    """Raised when a ``module:attribute`` target cannot be resolved."""


def _flag_type(option: click.Option) -> FlagType:
    """Map a click option's parameter type to a flag value type."""
    if option.is_flag:
        return FlagType.BOOL
    if option.multiple:
        return FlagType.STRINGS
    if isinstance(option.type, (click.types.IntParamType, click.IntRange)):
        return FlagType.INT
    if isinstance(option.type, (click.types.FloatParamType, click.FloatRange)):
        return FlagType.FLOAT
    if isinstance(option.type, click.types.BoolParamType):
        return FlagType.BOOL
    return FlagType.STRING


def _flag_default(option: click.Option, value_type: FlagType) -> Any:
    default = option.default
    if callable(default) or not isinstance(default, (bool, int, float, str, list, tuple)):
        return None
    if value_type == FlagType.STRINGS:
        return list(default) if isinstance(default, (list, tuple)) else [default]
    return default


def option_to_flag(option: click.Option) -> Flag:
    """Convert a click option to a Flag.

    The first ``--long`` option string becomes the flag name and the
    first ``-s`` string becomes the shorthand. Options with only a
    short form are named after their parameter name.

    Args:
        option: The click option to convert.

    Returns:
        The equivalent Flag.
    """
    long_names = [o[2:] for o in option.opts if o.startswith("--")]
    short_names = [o[1:] for o in option.opts if not o.startswith("--") and len(o) == 2]

    value_type = _flag_type(option)
    name = long_names[0] if long_names else (option.name or "").replace("_", "-")
    return Flag(
        name=name,
        shorthand=short_names[0] if short_names else "",
        usage=option.help or "",
        default=_flag_default(option, value_type),
        value_type=value_type,
        hidden=option.hidden,
    )


def _argument_usage(argument: click.Argument) -> str:
    metavar = argument.metavar or (argument.name or "").upper()
    if argument.nargs == -1:
        metavar += "..."
    if not argument.required:
        metavar = f"[{metavar}]"
    return metavar


def _first_paragraph(text: str) -> str:
    return text.strip().split("\n\n", 1)[0].replace("\n", " ").strip()


def from_click(
    command: click.Command,
    name: Optional[str] = None,
    parent_ctx: Optional[click.Context] = None,
) -> CommandNode:
    """Build a CommandNode tree from a click command or group.

    Args:
        command: The click command to convert.
        name: Name to use for the command; defaults to ``command.name``.
        parent_ctx: Context of the enclosing group, if any.

    Returns:
        The root CommandNode of the converted tree.
    """
    info_name = name or command.name or ""
    ctx = click.Context(command, info_name=info_name, parent=parent_ctx)

    help_text = (command.help or "").split("\f", 1)[0].strip()
    short = command.short_help or _first_paragraph(help_text)

    use_parts = [info_name]
    use_parts.extend(
        _argument_usage(p) for p in command.params if isinstance(p, click.Argument)
    )

    if isinstance(command, click.Group):
        runnable = command.invoke_without_command and command.callback is not None
    else:
        runnable = command.callback is not None

    deprecated = command.deprecated
    if deprecated is True:
        deprecated = "deprecated"

    node = CommandNode(
        use=" ".join(use_parts),
        short=short,
        long=help_text,
        example=(command.epilog or "").strip(),
        run=command.callback if runnable else None,
        hidden=command.hidden,
        deprecated=deprecated or "",
    )

    for param in command.get_params(ctx):
        if isinstance(param, click.Option):
            node.local_flags.add(option_to_flag(param))

    if isinstance(command, click.Group):
        for sub_name in command.list_commands(ctx):
            sub_command = command.get_command(ctx, sub_name)
            if sub_command is None:
                logger.debug("Skipping unresolvable subcommand %s", sub_name)
                continue
            node.add_command(from_click(sub_command, name=sub_name, parent_ctx=ctx))

    return node


def load_command(target: str) -> click.Command:
    """Resolve a ``package.module:attribute`` string to a click command.

    Args:
        target: Import path and attribute, separated by a colon.

    Returns:
        The click command the target names.

    Raises:
        CommandLoadError: If the target is malformed, cannot be imported,
            or does not name a click command.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise CommandLoadError(f"Expected 'module:attribute', got {target!r}")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise CommandLoadError(f"Cannot import {module_name}: {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise CommandLoadError(f"{module_name} has no attribute {attr_path}") from e

    if not isinstance(obj, click.Command):
        raise CommandLoadError(f"{target} is not a click command")

    logger.debug("Loaded command %s from %s", obj.name, target)
    return obj
