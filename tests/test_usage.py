"""Tests for usage output."""

from build_tools.constants import DOCS_URL
from build_tools.usage import format_command_rows, format_usage, longest_command_length

from conftest import make_task


class TestCommandTable:
    """Tests for the aligned command table."""

    def test_longest_command_length(self):
        descriptors = [make_task("a"), make_task("build")]
        assert longest_command_length(descriptors) == 5

    def test_longest_command_length_empty(self):
        assert longest_command_length([]) == 0

    def test_rows_aligned(self):
        """Shorter names are padded so descriptions share a column."""
        descriptors = [
            make_task("a", description="Short"),
            make_task("build", description="Build it"),
        ]

        rows = format_command_rows(descriptors)

        assert rows == [
            "  a      Short",
            "  build  Build it",
        ]
        assert rows[0].index("Short") == rows[1].index("Build it")

    def test_padding_difference(self):
        """'a' gets exactly four more spaces than 'build'."""
        rows = format_command_rows([
            make_task("a", description="x"),
            make_task("build", description="x"),
        ])
        gap_a = len(rows[0]) - len("  a") - len("x")
        gap_build = len(rows[1]) - len("  build") - len("x")
        assert gap_a - gap_build == 4

    def test_registration_order_kept(self):
        rows = format_command_rows([make_task("verify"), make_task("build"), make_task("demo")])
        assert [r.split()[0] for r in rows] == ["verify", "build", "demo"]


class TestFormatUsage:
    """Tests for the full usage text."""

    def test_sections(self, sample_registry):
        text = format_usage(sample_registry.list_all())
        lines = text.splitlines()

        assert lines[0] == "Usage: build-tools <command> [<options>]"
        assert "Commands:" in lines
        assert "Mostly used options include:" in lines
        assert lines[-1] == f"Full documentation: {DOCS_URL}"

    def test_lists_every_command(self, sample_registry):
        text = format_usage(sample_registry.list_all())
        for descriptor in sample_registry.list_all():
            assert descriptor.description in text

    def test_common_options(self, sample_registry):
        text = format_usage(sample_registry.list_all())
        assert "[--watch]" in text
        assert "Re-run every time a file changes" in text
        assert "[--npmRegistry=<url>]" in text
