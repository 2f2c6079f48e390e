"""
Markup Conventions
==================
The bit-exact markup the outline tools read and write:

- level-2 heading marker ``## ``
- quote-block marker ``> `` per line
- horizontal rule ``---`` (three or more hyphens)
- wikilinks ``[[target]]`` / ``[[target|display]]``
- the attribution sigil ``[[SourceName|*]]`` appended to a quoted block's
  last line; ``*`` as display text marks source credit rather than a link

All construction and detection of the attribution sigil goes through
``attribution_link`` / ``find_attribution`` / ``strip_attributions``.
"""

from __future__ import annotations

import re
from typing import List, Optional

HEADING_MARKER = "## "
QUOTE_MARKER = "> "
RULE = "---"
ATTRIBUTION_DISPLAY = "*"

HEADING_PATTERN = re.compile(r"^## (.+)$")
RULE_PATTERN = re.compile(r"^---+\s*$")
WIKILINK_PATTERN = re.compile(r"\[\[([^\]|#]+)(?:[|#][^\]]*)?\]\]")
ATTRIBUTION_PATTERN = re.compile(r"\[\[([^\]|]+)\|\*\]\]")
_ATTRIBUTION_WITH_SPACE = re.compile(r"[ \t]?\[\[[^\]|]+\|\*\]\]")
_ALIASED_LINK_PATTERN = re.compile(r"\[\[([^\]|]+)\|([^\]]+)\]\]")
_BARE_LINK_PATTERN = re.compile(r"\[\[([^\]]+)\]\]")
FRONTMATTER_PATTERN = re.compile(r"^---\n[\s\S]*?\n---\n?")

# Leading glyphs dropped from quote previews
_SMART_QUOTES = "“”‘’\"'"

ELLIPSIS = "…"


def split_lines(text: str) -> List[str]:
    return text.split("\n")


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)


def heading_text(line: str) -> Optional[str]:
    """Return the heading text of a level-2 heading line, else None."""
    m = HEADING_PATTERN.match(line)
    return m.group(1) if m else None


def is_heading(line: str) -> bool:
    return HEADING_PATTERN.match(line) is not None


def is_blank(line: str) -> bool:
    return line.strip() == ""


def is_rule(line: str) -> bool:
    return RULE_PATTERN.match(line) is not None


def is_separator(line: str) -> bool:
    """Blank lines and horizontal rules separate blocks but belong to none."""
    return is_blank(line) or is_rule(line)


def is_quote(line: str) -> bool:
    return line.startswith(">")


def heading_line(text: str) -> str:
    return f"{HEADING_MARKER}{text}"


def wikilink(target: str) -> str:
    return f"[[{target}]]"


def back_reference_line(target: str) -> str:
    """A pinned-section entry pointing at ``target``."""
    return f"- {wikilink(target)}"


def attribution_link(source_name: str) -> str:
    """Encode the attribution sigil for ``source_name``."""
    return f"[[{source_name}|{ATTRIBUTION_DISPLAY}]]"


def find_attribution(line: str) -> Optional[str]:
    """Decode the attribution sigil on a line, returning the source name."""
    m = ATTRIBUTION_PATTERN.search(line)
    return m.group(1).strip() if m else None


def strip_attributions(text: str) -> str:
    """Remove every attribution sigil (and the single space before it)."""
    return _ATTRIBUTION_WITH_SPACE.sub("", text)


def unwrap_wikilinks(text: str) -> str:
    """``[[target|display]]`` -> display, ``[[target]]`` -> target."""
    text = _ALIASED_LINK_PATTERN.sub(r"\2", text)
    return _BARE_LINK_PATTERN.sub(r"\1", text)


def parse_wikilinks(text: str) -> List[str]:
    """Distinct link targets in order of first appearance."""
    links: List[str] = []
    for m in WIKILINK_PATTERN.finditer(text):
        target = m.group(1).strip()
        if target and target not in links:
            links.append(target)
    return links


def quote_lines(text: str, source_name: Optional[str] = None) -> List[str]:
    """Prefix every line with the quote marker.

    When ``source_name`` is given the last line carries the attribution sigil.
    """
    lines = [(QUOTE_MARKER + line).rstrip() for line in split_lines(text)]
    if source_name:
        lines[-1] = f"{lines[-1]} {attribution_link(source_name)}"
    return lines


def unquote_line(line: str) -> str:
    """Strip the quote marker and any leading smart-quote glyphs."""
    return line.lstrip(">").strip().lstrip(_SMART_QUOTES).strip()


def strip_frontmatter(text: str) -> str:
    """Remove a ``---`` fenced metadata block at the very top."""
    return FRONTMATTER_PATTERN.sub("", text, count=1)


def strip_title_heading(text: str, title: str) -> str:
    """Remove a leading ``# <title>`` heading that repeats the note's name."""
    pattern = re.compile(r"^#\s+" + re.escape(title) + r"\s*\n?")
    return pattern.sub("", text, count=1)


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 1] + ELLIPSIS
