"""Pluggable JavaScript/CSS minifiers and the CDATA-aware delegation wrapper."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable

import rcssmin
import rjsmin

from markup_compressor.patterns import CDATA_WRAPPER_RE

logger = logging.getLogger(__name__)

Minifier = Callable[[str], str]


def javascript_minifier(keep_bang_comments: bool = False) -> Minifier:
    """Return an rjsmin-backed minifier (``/*! ... */`` comments optionally kept)."""
    return functools.partial(rjsmin.jsmin, keep_bang_comments=keep_bang_comments)


def css_minifier(keep_bang_comments: bool = False) -> Minifier:
    """Return an rcssmin-backed minifier (``/*! ... */`` comments optionally kept)."""
    return functools.partial(rcssmin.cssmin, keep_bang_comments=keep_bang_comments)


def default_javascript_minifier(source: str) -> str:
    return rjsmin.jsmin(source)


def default_css_minifier(source: str) -> str:
    return rcssmin.cssmin(source)


def minify_block(minifier: Minifier, source: str, kind: str = "javascript") -> str:
    """Run *minifier* over one script or style block.

    A ``<![CDATA[ ... ]]>`` wrapper around the whole block is removed before
    minifying and put back around the result. If the minifier raises, or
    returns something other than a string, the block is returned unchanged.
    """
    match = CDATA_WRAPPER_RE.fullmatch(source)
    body = match.group(1) if match else source

    try:
        result = minifier(body)
    except Exception:
        logger.warning("%s minifier failed; keeping block unchanged", kind, exc_info=True)
        return source

    if not isinstance(result, str):
        logger.warning("%s minifier returned %s; keeping block unchanged", kind, type(result).__name__)
        return source

    if match:
        result = f"<![CDATA[{result}]]>"
    return result
