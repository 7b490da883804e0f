"""Extract protected spans into placeholder tokens and put them back.

Tokens look like ``%%%~COMPRESS~PRE~0~%%%``; user-pattern tokens also carry
the pattern position: ``%%%~COMPRESS~USER2~0~%%%``.

Every ``~`` of the input is extracted first (:attr:`Category.ESCAPE`) and
restored last. With no ``~`` left in document text, the ``%%%~COMPRESS~``
prefix can only start at a real token, so no rewrite of the surrounding
text can assemble a placeholder out of input characters.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import logging
import re
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Category(str, enum.Enum):
    """Kinds of protected blocks, each with its own index sequence."""

    ESCAPE = "ESCAPE"
    USER = "USER"
    SKIP = "SKIP"
    COND = "COND"
    EVENT = "EVENT"
    PRE = "PRE"
    SCRIPT = "SCRIPT"
    STYLE = "STYLE"
    TEXTAREA = "TEXTAREA"
    LINE_BREAK = "LT"
    CDATA = "CDATA"


@dataclasses.dataclass(frozen=True, slots=True)
class ProtectedBlock:
    """A span pulled out of the document before residual processing."""

    category: Category
    index: int         # ordinal within its category, the only key used on restore
    text: str          # content written back in place of the token


# Runs of the token separator character.
SEPARATOR_RUN_RE = re.compile(r"~+")


def _label(category: Category, position: int | None) -> str:
    if position is None:
        return category.value
    return f"{category.value}{position}"


def placeholder(category: Category, index: int, position: int | None = None) -> str:
    """Build the token for block *index* of *category*."""
    return f"%%%~COMPRESS~{_label(category, position)}~{index}~%%%"


@functools.lru_cache(maxsize=None)
def placeholder_pattern(category: Category, position: int | None = None) -> re.Pattern[str]:
    """Pattern matching every token of one category, index in group 1."""
    return re.compile(r"%%%~COMPRESS~" + re.escape(_label(category, position)) + r"~(\d+)~%%%")


def extract(
    category: Category,
    pattern: re.Pattern[str],
    text: str,
    *,
    group: int = 0,
    whole: bool = False,
    position: int | None = None,
    skip_blank: bool = True,
    accept: Callable[[re.Match[str]], bool] | None = None,
    transform: Callable[[re.Match[str]], str] | None = None,
    blocks: list[ProtectedBlock] | None = None,
) -> tuple[str, list[ProtectedBlock]]:
    """Replace every match of *pattern* in *text* with a placeholder token.

    Args:
        category: Category the new blocks belong to.
        pattern: Matcher for the protected region.
        text: Document to scan.
        group: Capture group holding the block content. With ``whole=False``
            only this group is swapped for the token, so tag-wrapped regions
            keep their opening and closing tags in the document.
        whole: Replace the entire match rather than just *group*.
        position: Pattern-list position, for user-pattern categories.
        skip_blank: Leave matches whose content is empty or whitespace alone.
        accept: Optional veto; a match for which it returns False is left alone.
        transform: Computes the stored text from the match (defaults to the
            content group).
        blocks: Accumulator to append to; indexes continue from its length.

    Returns:
        The rewritten document and the block list.
    """
    if blocks is None:
        blocks = []

    parts: list[str] = []
    prev_end = 0

    for match in pattern.finditer(text):
        content = match.group(group) or ""
        if skip_blank and not content.strip():
            continue
        if accept is not None and not accept(match):
            continue

        start, end = match.span(0 if whole else group)
        index = len(blocks)
        stored = transform(match) if transform is not None else content
        blocks.append(ProtectedBlock(category, index, stored))

        parts.append(text[prev_end:start])
        parts.append(placeholder(category, index, position))
        prev_end = end

    if not parts:
        return text, blocks

    parts.append(text[prev_end:])
    return "".join(parts), blocks


def restore(
    category: Category,
    text: str,
    blocks: list[ProtectedBlock],
    position: int | None = None,
) -> str:
    """Put the blocks of one category back in place of their tokens.

    Block text is inserted literally. A token whose index has no block is
    left as it is.
    """
    if not blocks:
        return text

    def _substitute(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index < len(blocks):
            return blocks[index].text
        logger.debug("No %s block for placeholder index %d; leaving it in place", category.value, index)
        return match.group(0)

    return placeholder_pattern(category, position).sub(_substitute, text)


def escape_separators(
    text: str, blocks: list[ProtectedBlock] | None = None
) -> tuple[str, list[ProtectedBlock]]:
    """Move every ``~`` of *text* into :attr:`Category.ESCAPE` blocks.

    Pass the list from an earlier call as *blocks* to shield text produced
    later in the same run (e.g. minifier output) under the same category.
    """
    return extract(Category.ESCAPE, SEPARATOR_RUN_RE, text, skip_blank=False, blocks=blocks)


def unescape_separators(text: str, blocks: list[ProtectedBlock]) -> str:
    return restore(Category.ESCAPE, text, blocks)
