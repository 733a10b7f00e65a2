"""Tests for extracting render-ready records from commands."""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from cmddoc.generators.extractor import (
    RenderableCommand,
    doc_basename,
    extract,
    format_date,
    link_line,
    split_flags,
)
from cmddoc.tree.command import CommandNode

TODAY = date(2024, 3, 5)


def _anchor(name: str) -> str:
    return "#" + name[: -len(".md")].replace("_", "-")


class TestHelpers:
    """Tests for link and date helpers."""

    def test_doc_basename(self) -> None:
        assert doc_basename("root echo times") == "root_echo_times.md"

    def test_link_line(self) -> None:
        line = link_line("root echo", lambda s: s, "Echo it")
        assert line == "* [root echo](root_echo.md)\t - Echo it\n"

    def test_format_date_no_leading_zero(self) -> None:
        assert format_date(TODAY) == "5-Mar-2024"
        assert format_date(date(2023, 12, 25)) == "25-Dec-2023"


class TestSplitFlags:
    """Tests for splitting a flag block into per-flag entries."""

    def test_splits_and_restores_dash(self) -> None:
        text = (
            '      --name who   your who name (default "world")\n'
            "  -v, --verbose    verbose output\n"
        )
        assert split_flags(text) == [
            '      --name who   your who name (default "world")',
            "-v, --verbose    verbose output\n",
        ]

    def test_long_only_flag_after_first(self) -> None:
        text = "  -a, --all   everything\n      --bare   nothing\n"
        assert split_flags(text)[1] == "--bare   nothing\n"

    def test_single_flag(self) -> None:
        text = "  -h, --help   help for app\n"
        assert split_flags(text) == [text]

    def test_empty(self) -> None:
        assert split_flags("") == []

    def test_drops_trailing_empty_piece(self) -> None:
        assert split_flags("--a --b\n  -") == ["--a --b"]

    def test_usage_containing_marker_is_degenerate(self) -> None:
        text = "      --sep string   separator\n   -not a flag\n      --z string   other\n"
        pieces = split_flags(text)
        assert len(pieces) == 2
        assert pieces[1].startswith("-not a flag")
        assert "--z" in pieces[1]


class TestExtract:
    """Tests for the extract function."""

    def test_name_and_descriptions(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        assert record.name == "root echo"
        assert record.short == "Echo anything to the screen"
        assert record.long == "an utterly useless command for testing."
        assert record.example == "Just run root echo hello"

    def test_long_falls_back_to_short(self, root_cmd: CommandNode) -> None:
        record = extract(root_cmd.find("echo times"), today=TODAY)
        assert record.long == "Echo anything to the screen more times"

    def test_missing_descriptions_are_empty(self) -> None:
        record = extract(CommandNode(use="bare"), today=TODAY)
        assert record.short == ""
        assert record.long == ""

    def test_use_line(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        assert record.use_line == "root echo [string to echo] [flags]"

    def test_flags_split_own_and_inherited(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        assert "boolone" in record.flags
        assert "strone" in record.flags
        assert "rootflag" not in record.flags
        assert "rootflag" in record.parent_flags
        assert "strtwo" in record.parent_flags

    def test_flag_slice_one_entry_per_flag(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        assert len(record.flag_slice) == 4
        assert record.flag_slice[0].lstrip().startswith("-b, --boolone")
        assert all(entry.startswith("-") for entry in record.flag_slice[1:])

    def test_hidden_flags_left_out(self, root_cmd: CommandNode, echo_cmd: CommandNode) -> None:
        for name in ("rootflag", "strtwo"):
            root_cmd.persistent_flags.lookup(name).hidden = True
        record = extract(echo_cmd, today=TODAY)
        assert record.parent_flags == ""
        assert "rootflag" not in record.flags

    def test_no_flags(self) -> None:
        record = extract(CommandNode(use="bare"), today=TODAY)
        assert record.flags == ""
        assert record.flag_slice == ()

    def test_parent_link(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        assert record.parent_link == "* [root](root.md)\t - Root short description\n"

    def test_root_has_no_parent_link(self, root_cmd: CommandNode) -> None:
        assert extract(root_cmd, today=TODAY).parent_link == ""

    def test_children_sorted_and_filtered(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        assert record.children_links == (
            "* [root echo echosub](root_echo_echosub.md)\t - second sub command for echo\n",
            "* [root echo times](root_echo_times.md)\t - Echo anything to the screen more times\n",
        )

    def test_root_children_skip_hidden_and_topics(self, root_cmd: CommandNode) -> None:
        record = extract(root_cmd, today=TODAY)
        joined = "".join(record.children_links)
        assert len(record.children_links) == 2
        assert "root secret" not in joined
        assert "root topic" not in joined

    def test_related_links_keep_order_and_filter(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        assert record.related_links == (
            "* [root print](root_print.md)\t - Print anything to the screen\n",
        )

    def test_link_handler_applied(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, link_handler=_anchor, today=TODAY)
        assert record.command_link == "#root-echo"
        assert "(#root)" in record.parent_link
        assert "(#root-echo-times)" in record.children_links[1]

    def test_header_scale(self, root_cmd: CommandNode) -> None:
        assert extract(root_cmd, today=TODAY).header_scale == 0
        assert extract(root_cmd.find("echo"), today=TODAY).header_scale == 1
        assert extract(root_cmd.find("echo times"), today=TODAY).header_scale == 2

    def test_auto_gen_tag(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, tool_name="mytool", today=TODAY)
        assert record.auto_gen_tag == "Auto generated by mytool on 5-Mar-2024"

    def test_auto_gen_tag_suppressed_by_ancestor(
        self, root_cmd: CommandNode, echo_cmd: CommandNode
    ) -> None:
        root_cmd.disable_auto_gen_tag = True
        assert extract(echo_cmd, today=TODAY).auto_gen_tag == ""

    def test_record_is_frozen(self, echo_cmd: CommandNode) -> None:
        record = extract(echo_cmd, today=TODAY)
        with pytest.raises(FrozenInstanceError):
            record.name = "other"  # type: ignore[misc]

    def test_to_dict(self) -> None:
        record = RenderableCommand(name="tool", short="A tool")
        data = record.to_dict()
        assert data["name"] == "tool"
        assert data["children_links"] == ()
        assert "header_scale" in data

    def test_extract_is_deterministic(self, echo_cmd: CommandNode) -> None:
        assert extract(echo_cmd, today=TODAY) == extract(echo_cmd, today=TODAY)
