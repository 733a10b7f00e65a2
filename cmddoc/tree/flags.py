"""Flag definitions and the column-aligned flag printer.

A FlagSet holds the flags declared on one command. Its printer emits
one line per visible flag in a fixed column layout, which the
extractor later splits back into per-flag entries.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, TextIO


class FlagType(str, Enum):
    """Value types a flag can carry."""

    BOOL = "bool"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    STRINGS = "strings"
    DURATION = "duration"


_ZERO_DEFAULTS = {
    FlagType.BOOL: ("false",),
    FlagType.STRING: ("",),
    FlagType.INT: ("0",),
    FlagType.FLOAT: ("0",),
    FlagType.STRINGS: ("[]",),
    FlagType.DURATION: ("0", "0s"),
}


@dataclass
class Flag:
    """A single command-line flag.

    Attributes:
        name: Long flag name, without the leading dashes.
        shorthand: Optional one-letter short name.
        usage: Help text. A back-quoted word names the value placeholder.
        default: Default value; None means the zero value of the type.
        value_type: The kind of value the flag takes.
        hidden: Whether the flag is left out of help and docs.
        deprecated: Deprecation message; a deprecated flag is not shown.
        no_opt_default: Value used when the flag is given without a value.
    """

    name: str
    shorthand: str = ""
    usage: str = ""
    default: Any = None
    value_type: FlagType = FlagType.STRING
    hidden: bool = False
    deprecated: str = ""
    no_opt_default: str = ""

    def __post_init__(self) -> None:
        self.value_type = FlagType(self.value_type)
        if self.value_type == FlagType.BOOL and not self.no_opt_default:
            self.no_opt_default = "true"

    @property
    def visible(self) -> bool:
        return not self.hidden and not self.deprecated

    @property
    def def_value(self) -> str:
        """Default value as it appears in help output."""
        value = self.default
        if value is None:
            return _ZERO_DEFAULTS[self.value_type][0]
        if self.value_type == FlagType.BOOL:
            return "true" if value else "false"
        if self.value_type == FlagType.STRINGS:
            return "[" + ",".join(str(v) for v in value) + "]"
        if self.value_type == FlagType.FLOAT:
            return f"{value:g}"
        if self.value_type == FlagType.DURATION and isinstance(value, (int, float)):
            return f"{value:g}s"
        return str(value)

    def has_zero_default(self) -> bool:
        return self.def_value in _ZERO_DEFAULTS[self.value_type]

    def unquote_usage(self) -> tuple[str, str]:
        """Split the usage text into a value placeholder and the help text.

        Returns:
            Tuple of (placeholder, usage). The placeholder is the first
            back-quoted word in the usage if any, otherwise a name
            derived from the value type (empty for bool flags).
        """
        usage = self.usage
        start = usage.find("`")
        if start != -1:
            end = usage.find("`", start + 1)
            if end != -1:
                name = usage[start + 1 : end]
                return name, usage[:start] + name + usage[end + 1 :]

        if self.value_type == FlagType.BOOL:
            return "", usage
        return self.value_type.value, usage


class FlagSet:
    """An ordered set of flags keyed by long name."""

    def __init__(self, flags: Optional[list[Flag]] = None) -> None:
        self._flags: dict[str, Flag] = {}
        for flag in flags or []:
            self.add(flag)

    def add(self, flag: Flag) -> Flag:
        """Add a flag to the set.

        Raises:
            ValueError: If a flag with the same name is already defined.
        """
        if flag.name in self._flags:
            raise ValueError(f"flag redefined: {flag.name}")
        self._flags[flag.name] = flag
        return flag

    def add_flag(
        self,
        name: str,
        value_type: FlagType = FlagType.STRING,
        default: Any = None,
        usage: str = "",
        shorthand: str = "",
        hidden: bool = False,
    ) -> Flag:
        return self.add(
            Flag(
                name=name,
                shorthand=shorthand,
                usage=usage,
                default=default,
                value_type=value_type,
                hidden=hidden,
            )
        )

    def lookup(self, name: str) -> Optional[Flag]:
        return self._flags.get(name)

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags.values())

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, name: object) -> bool:
        return name in self._flags

    def has_available_flags(self) -> bool:
        """Return True if at least one flag would be shown."""
        return any(flag.visible for flag in self)

    def format_defaults(self) -> str:
        """Format every visible flag as one aligned help line.

        Flags are sorted by name. The help column starts three spaces
        after the widest flag column; continuation lines of a multi-line
        usage are indented to the same column.

        Returns:
            The formatted block, or an empty string when no flag is visible.
        """
        rows: list[tuple[str, str]] = []
        width = 0

        for flag in sorted(self, key=lambda f: f.name):
            if not flag.visible:
                continue

            if flag.shorthand:
                head = f"  -{flag.shorthand}, --{flag.name}"
            else:
                head = f"      --{flag.name}"

            placeholder, usage = flag.unquote_usage()
            if placeholder:
                head += " " + placeholder

            if flag.no_opt_default:
                if flag.value_type == FlagType.STRING:
                    head += f'[="{flag.no_opt_default}"]'
                elif flag.value_type == FlagType.BOOL:
                    if flag.no_opt_default != "true":
                        head += f"[={flag.no_opt_default}]"
                else:
                    head += f"[={flag.no_opt_default}]"

            if not flag.has_zero_default():
                if flag.value_type == FlagType.STRING:
                    usage += f" (default {json.dumps(flag.def_value, ensure_ascii=False)})"
                else:
                    usage += f" (default {flag.def_value})"

            width = max(width, len(head))
            rows.append((head, usage))

        lines = []
        for head, usage in rows:
            spacing = " " * (width + 1 - len(head))
            usage = usage.replace("\n", "\n" + " " * (width + 3))
            lines.append(f"{head} {spacing} {usage}\n")
        return "".join(lines)

    def print_defaults(self, stream: TextIO) -> None:
        """Write the formatted flag block to a text stream."""
        stream.write(self.format_defaults())
