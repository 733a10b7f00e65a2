"""Command tree model.

A CommandNode is one entry in a CLI command hierarchy. Children are
owned by their parent; the parent attribute is only a back-reference
set by ``add_command``. Related commands are cross references to
nodes elsewhere in the tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from cmddoc.tree.flags import FlagSet, FlagType


@dataclass(eq=False)
class CommandNode:
    """A command in a CLI command tree.

    Attributes:
        use: One-line usage; its first word is the command name.
        short: Short description shown in listings.
        long: Long description shown in the command's own page.
        example: Example invocations.
        local_flags: Flags that apply only to this command.
        persistent_flags: Flags this command passes down to its descendants.
        run: Callback invoked when the command runs; None for pure groups.
        hidden: Whether the command is left out of listings.
        deprecated: Deprecation message; a deprecated command is unavailable.
        disable_auto_gen_tag: Suppress the generated-by footer for this
            command and its descendants.
        disable_flags_in_use_line: Do not append ``[flags]`` to the use line.
        related: Commands cross-referenced from this one.
    """

    use: str
    short: str = ""
    long: str = ""
    example: str = ""
    local_flags: FlagSet = field(default_factory=FlagSet)
    persistent_flags: FlagSet = field(default_factory=FlagSet)
    run: Optional[Callable[..., object]] = None
    hidden: bool = False
    deprecated: str = ""
    disable_auto_gen_tag: bool = False
    disable_flags_in_use_line: bool = False
    related: list[CommandNode] = field(default_factory=list)
    children: list[CommandNode] = field(default_factory=list, init=False)
    parent: Optional[CommandNode] = field(default=None, init=False, repr=False)

    @property
    def name(self) -> str:
        parts = self.use.split()
        return parts[0] if parts else ""

    @property
    def runnable(self) -> bool:
        return self.run is not None

    def add_command(self, *commands: CommandNode) -> None:
        """Attach commands as children of this node.

        Raises:
            ValueError: If a command is added to itself.
        """
        for command in commands:
            if command is self:
                raise ValueError("command can't be a child of itself")
            command.parent = self
            self.children.append(command)

    def has_parent(self) -> bool:
        return self.parent is not None

    def visit_parents(self, visitor: Callable[[CommandNode], None]) -> None:
        """Call visitor on every ancestor, nearest first."""
        parent = self.parent
        while parent is not None:
            visitor(parent)
            parent = parent.parent

    def root(self) -> CommandNode:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def depth(self) -> int:
        """Number of ancestors between this node and the root."""
        count = 0
        parent = self.parent
        while parent is not None:
            count += 1
            parent = parent.parent
        return count

    def command_path(self) -> str:
        """Full path from the root, names joined by spaces."""
        if self.parent is not None:
            return f"{self.parent.command_path()} {self.name}"
        return self.name

    def use_line(self) -> str:
        """Usage line including the parent's command path.

        ``[flags]`` is appended when the command has visible flags and
        the use string does not already mention it.
        """
        if self.parent is not None:
            line = f"{self.parent.command_path()} {self.use}"
        else:
            line = self.use

        if self.disable_flags_in_use_line:
            return line
        if self.has_available_flags() and "[flags]" not in line:
            line += " [flags]"
        return line

    def non_inherited_flags(self) -> FlagSet:
        """Local flags plus persistent flags declared on this command."""
        flags = FlagSet(list(self.local_flags))
        for flag in self.persistent_flags:
            if flag.name not in flags:
                flags.add(flag)
        return flags

    def inherited_flags(self) -> FlagSet:
        """Persistent flags from ancestors that this command does not shadow."""
        own = self.non_inherited_flags()
        inherited = FlagSet()

        def collect(parent: CommandNode) -> None:
            for flag in parent.persistent_flags:
                if flag.name not in own and flag.name not in inherited:
                    inherited.add(flag)

        self.visit_parents(collect)
        return inherited

    def has_available_flags(self) -> bool:
        return (
            self.non_inherited_flags().has_available_flags()
            or self.inherited_flags().has_available_flags()
        )

    def init_default_help_flag(self) -> None:
        """Add a ``-h, --help`` flag unless one is already defined."""
        if "help" in self.non_inherited_flags() or "help" in self.inherited_flags():
            return
        shorthand = "h"
        for flag in [*self.non_inherited_flags(), *self.inherited_flags()]:
            if flag.shorthand == "h":
                shorthand = ""
        self.local_flags.add_flag(
            "help",
            FlagType.BOOL,
            default=False,
            usage=f"help for {self.name}",
            shorthand=shorthand,
        )

    def is_available_command(self) -> bool:
        """Whether the command is a real, visible command.

        Hidden and deprecated commands are unavailable. Otherwise a
        command is available if it can run or has an available child.
        """
        if self.hidden or self.deprecated:
            return False
        if self.runnable:
            return True
        return any(child.is_available_command() for child in self.children)

    def is_additional_help_topic_command(self) -> bool:
        """Whether the command is a placeholder help topic.

        A help topic cannot run, is neither hidden nor deprecated, and
        only has help-topic children.
        """
        if self.runnable or self.hidden or self.deprecated:
            return False
        return all(
            child.is_additional_help_topic_command() for child in self.children
        )

    def auto_gen_tag_disabled(self) -> bool:
        """Whether this command or any ancestor suppresses the footer."""
        disabled = [self.disable_auto_gen_tag]
        self.visit_parents(lambda c: disabled.append(c.disable_auto_gen_tag))
        return any(disabled)

    def sorted_children(self) -> list[CommandNode]:
        return sorted(self.children, key=lambda c: c.name)

    def walk(self) -> Iterator[CommandNode]:
        """Yield this node and every descendant, parents first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: str) -> Optional[CommandNode]:
        """Find a descendant by space-separated names below this node."""
        node: Optional[CommandNode] = self
        for part in path.split():
            if node is None:
                return None
            node = next((c for c in node.children if c.name == part), None)
        return node
