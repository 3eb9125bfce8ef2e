"""Usage text listing the registered commands."""

from typing import List, Sequence

from build_tools.constants import DOCS_URL
from build_tools.models import TaskDescriptor

COMMON_OPTIONS = [
    ("[--watch]", "Re-run every time a file changes"),
    ("[--runServer]", "Build demos locally and runs a server"),
    ("[--updateorigami]", "Update origami.json with the latest demo files created"),
    ("[--js=<path>]", "Main JavaScript file (default: ./src/main.js)"),
    ("[--sass=<path>]", "Main Sass file (default: ./src/main.scss)"),
    ("[--buildJs=<file>]", "Compiled JavaScript file (default: main.js)"),
    ("[--buildCss=<file>]", "Compiled CSS file (default: main.css)"),
    ("[--buildFolder=<dir>]", "Compiled assets directory (default: ./build/)"),
    ("[--scssLintPath=<path>]", "Custom scss-lint configuration"),
    ("[--esLintPath=<path>]", "Custom esLint configuration"),
    ("[--editorconfigPath=<path>]", "Custom .editorconfig"),
    ("[--npmRegistry=<url>]", "Custom npm registry"),
    ("[--config=<path>]", "Project configuration file (default: ./build-tools.json)"),
    ("[--verbose]", "Show diagnostic logging"),
]


def longest_command_length(descriptors: Sequence[TaskDescriptor]) -> int:
    """Length of the longest command name (0 when there are none)."""
    return max((len(d.name) for d in descriptors), default=0)


def format_command_rows(descriptors: Sequence[TaskDescriptor]) -> List[str]:
    """One row per command, descriptions aligned in a single column."""
    longest = longest_command_length(descriptors)
    rows = []
    for descriptor in descriptors:
        padding = " " * (longest - len(descriptor.name))
        rows.append(f"  {descriptor.name}{padding}  {descriptor.description}".rstrip())
    return rows


def format_usage(descriptors: Sequence[TaskDescriptor]) -> str:
    """Full usage text: command table, common options and docs link."""
    option_width = max(len(flag) for flag, _ in COMMON_OPTIONS)

    lines = [
        "Usage: build-tools <command> [<options>]",
        "",
        "Commands:",
        *format_command_rows(descriptors),
        "",
        "Mostly used options include:",
    ]
    for flag, help_text in COMMON_OPTIONS:
        lines.append(f"   {flag.ljust(option_width)}  {help_text}")
    lines.append("")
    lines.append(f"Full documentation: {DOCS_URL}")
    return "\n".join(lines)
