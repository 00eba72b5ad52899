# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Source text helpers shared by the regex-based extractors."""

import logging
import re

logger = logging.getLogger(__name__)

_OPENERS = "<([{"
_CLOSERS = ">)]}"
_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}

_C_COMMENT_PATTERN = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
_WHITESPACE_PATTERN = re.compile(r"\s+")
_RECEIVER_TEXTS = frozenset({"self", "&self", "&mut self", "mut self"})


def split_parameters(text: str) -> list[str]:
    """Split a parameter list into top-level comma separated segments.

    Nesting is tracked with one integer depth over ``< ( [ {`` and
    ``> ) ] }``. The ``>`` of ``->`` and ``=>`` does not close anything and
    the ``<`` of a Go channel direction ``<-`` does not open anything.

    Args:
        text: Parameter list text without the enclosing parentheses.

    Returns:
        Trimmed, non-empty segments in declaration order.
    """
    segments: list[str] = []
    depth = 0
    current: list[str] = []
    previous = ""
    for index, char in enumerate(text):
        if char in _OPENERS and not (char == "<" and text[index + 1 : index + 2] == "-"):
            depth += 1
        elif char in _CLOSERS and not (char == ">" and previous in ("-", "=")):
            depth -= 1
        elif char == "," and depth == 0:
            segments.append("".join(current).strip())
            current = []
            previous = char
            continue
        current.append(char)
        previous = char
    segments.append("".join(current).strip())
    return [segment for segment in segments if segment]


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to one space and trim."""
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def normalize_c_type(text: str) -> str:
    """Normalize a C/C++ type, removing spacing around ``*`` and ``&``.

    Args:
        text: Raw type text.

    Returns:
        Normalized type text, e.g. ``const char*``.
    """
    collapsed = collapse_whitespace(text)
    collapsed = re.sub(r"\s*\*\s*", "*", collapsed)
    return re.sub(r"\s*&\s*", "&", collapsed).strip()


def strip_c_comments(source: str) -> str:
    """Remove ``//`` and ``/* */`` comments, keeping line structure.

    String literals are not recognized, so a ``//`` inside a string starts a
    comment here as well.

    Args:
        source: Raw source text.

    Returns:
        Source text with comments replaced by their newlines.
    """
    return _C_COMMENT_PATTERN.sub(lambda match: "\n" * match.group(0).count("\n"), source)


def find_closing(text: str, open_index: int) -> int:
    """Find the index of the delimiter closing the one at ``open_index``.

    Args:
        text: Text to scan.
        open_index: Index of an opening ``(``, ``[``, ``{`` or ``<``.

    Returns:
        Index of the matching closer, or ``-1`` when it is unbalanced.
    """
    opener = text[open_index]
    closer = _PAIRS[opener]
    depth = 0
    for index in range(open_index, len(text)):
        char = text[index]
        if char == opener:
            depth += 1
        elif char == closer:
            if closer == ">" and index > 0 and text[index - 1] in "-=":
                continue
            depth -= 1
            if depth == 0:
                return index
    return -1


def read_group(text: str, open_index: int) -> tuple[str, int] | None:
    """Read a balanced group starting at ``open_index``.

    Args:
        text: Text to scan.
        open_index: Index of the opening delimiter.

    Returns:
        Tuple of the inner text and the index just past the closer, or
        ``None`` when the group never closes.
    """
    close_index = find_closing(text, open_index)
    if close_index == -1:
        return None
    return text[open_index + 1 : close_index], close_index + 1


def blank_nested_blocks(body: str) -> str:
    """Replace the contents of nested ``{...}`` blocks with spaces.

    Braces and newlines are kept so offsets and line anchors survive, but
    declarations inside method bodies or nested types no longer match
    patterns meant for the enclosing level.

    Args:
        body: Text of one block body, without its own braces.

    Returns:
        Body text of identical length with nested content blanked.
    """
    chars = list(body)
    depth = 0
    for index, char in enumerate(chars):
        if char == "{":
            depth += 1
            continue
        if char == "}":
            depth = max(0, depth - 1)
            continue
        if depth > 0 and char != "\n":
            chars[index] = " "
    return "".join(chars)


def skip_whitespace(text: str, index: int) -> int:
    """Return the first index at or after ``index`` that is not whitespace."""
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def is_receiver_text(text: str) -> bool:
    """Check whether raw parameter text is a receiver (``self``) form.

    Args:
        text: Raw parameter text.

    Returns:
        True for ``self``, ``&self``, ``&mut self``, ``mut self`` and typed
        ``self:``/``mut self:`` forms.
    """
    stripped = collapse_whitespace(text)
    if stripped in _RECEIVER_TEXTS:
        return True
    return stripped.startswith("self:") or stripped.startswith("mut self:")


def count_type_parameters(text: str | None) -> int:
    """Count generic parameters in the text between ``<>`` or ``[]``.

    Args:
        text: Inner text of a type parameter list, or ``None``.

    Returns:
        Number of top-level type parameters.
    """
    if not text:
        return 0
    return len(split_parameters(text))
