"""Shared fixtures: a small command tree covering every listing rule."""

import pytest

from cmddoc.tree.command import CommandNode
from cmddoc.tree.flags import FlagType


def _noop(*args, **kwargs) -> None:
    pass


def build_tree() -> CommandNode:
    """Build a root command with runnable, deprecated, hidden and help-topic children."""
    root = CommandNode(
        use="root",
        short="Root short description",
        long="Root long description",
        run=_noop,
    )
    root.persistent_flags.add_flag(
        "rootflag", FlagType.STRING, default="two", usage="help message for rootflag"
    )
    root.persistent_flags.add_flag(
        "strtwo",
        FlagType.STRING,
        default="two",
        usage="help message for parent flag strtwo",
        shorthand="t",
    )

    echo = CommandNode(
        use="echo [string to echo]",
        short="Echo anything to the screen",
        long="an utterly useless command for testing.",
        example="Just run root echo hello",
        run=_noop,
    )
    echo.persistent_flags.add_flag(
        "strone", FlagType.STRING, default="one", usage="help message for flag strone", shorthand="s"
    )
    echo.persistent_flags.add_flag(
        "persistentbool",
        FlagType.BOOL,
        default=False,
        usage="help message for flag persistentbool",
        shorthand="p",
    )
    echo.local_flags.add_flag(
        "intone", FlagType.INT, default=123, usage="help message for flag intone", shorthand="i"
    )
    echo.local_flags.add_flag(
        "boolone", FlagType.BOOL, default=True, usage="help message for flag boolone", shorthand="b"
    )

    times = CommandNode(
        use="times [# times] [string to echo]",
        short="Echo anything to the screen more times",
        run=_noop,
    )
    echo_sub = CommandNode(
        use="echosub [string to print]",
        short="second sub command for echo",
        run=_noop,
    )
    deprecated = CommandNode(
        use="deprecated [can't do anything here]",
        short="A command which is deprecated",
        deprecated="Please use echo instead",
        run=_noop,
    )
    echo.add_command(times, echo_sub, deprecated)

    print_cmd = CommandNode(use="print [string to print]", short="Print anything to the screen", run=_noop)
    topic = CommandNode(use="topic", short="An additional help topic")
    hidden = CommandNode(use="secret", short="Something hidden", hidden=True, run=_noop)
    echo.related.extend([print_cmd, hidden])

    root.add_command(print_cmd, echo, topic, hidden)
    return root


@pytest.fixture
def root_cmd() -> CommandNode:
    return build_tree()


@pytest.fixture
def echo_cmd(root_cmd: CommandNode) -> CommandNode:
    return root_cmd.find("echo")
