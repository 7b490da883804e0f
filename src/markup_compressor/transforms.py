"""Whitespace, attribute and protocol rewrites applied outside protected blocks.

Every function takes the placeholder-bearing document and the options and
returns the rewritten document; a function whose toggle is off returns its
input. :func:`process_html` runs them in their required order.
"""

from __future__ import annotations

import re

from markup_compressor import patterns
from markup_compressor.config import CompressorOptions


def remove_comments(html: str, options: CompressorOptions) -> str:
    if options.remove_comments:
        html = patterns.COMMENT_RE.sub("", html)
    return html


def simple_doctype(html: str, options: CompressorOptions) -> str:
    if options.simple_doctype:
        html = patterns.DOCTYPE_RE.sub(patterns.SIMPLE_DOCTYPE, html)
    return html


def remove_script_attributes(html: str, options: CompressorOptions) -> str:
    if options.remove_script_attributes:
        html = patterns.JS_TYPE_ATTR_RE.sub(r"\1\3", html)
        html = patterns.JS_LANGUAGE_ATTR_RE.sub(r"\1\3", html)
    return html


def remove_style_attributes(html: str, options: CompressorOptions) -> str:
    if options.remove_style_attributes:
        html = patterns.STYLE_TYPE_ATTR_RE.sub(r"\1\3", html)
    return html


def remove_link_attributes(html: str, options: CompressorOptions) -> str:
    """Drop ``type="text/css"`` from ``<link>`` tags that are stylesheets."""
    if not options.remove_link_attributes:
        return html

    def _strip_type(match: re.Match[str]) -> str:
        # the rel check needs the whole tag, not just the captured halves
        if patterns.LINK_REL_STYLESHEET_RE.fullmatch(match.group(0)):
            return match.group(1) + match.group(3)
        return match.group(0)

    return patterns.LINK_TYPE_ATTR_RE.sub(_strip_type, html)


def remove_form_attributes(html: str, options: CompressorOptions) -> str:
    if options.remove_form_attributes:
        html = patterns.FORM_METHOD_ATTR_RE.sub(r"\1\3", html)
    return html


def remove_input_attributes(html: str, options: CompressorOptions) -> str:
    if options.remove_input_attributes:
        html = patterns.INPUT_TYPE_ATTR_RE.sub(r"\1\3", html)
    return html


def simple_boolean_attributes(html: str, options: CompressorOptions) -> str:
    """``checked="checked"`` -> ``checked``, for every such attribute of a tag."""
    if not options.simple_boolean_attributes:
        return html
    return patterns.TAG_RE.sub(
        lambda tag: patterns.BOOLEAN_ATTR_RE.sub(r"\1\2", tag.group(0)),
        html,
    )


def _strip_protocol(html: str, attr_pattern: re.Pattern[str]) -> str:
    def _rewrite_tag(tag: re.Match[str]) -> str:
        if patterns.REL_EXTERNAL_RE.fullmatch(tag.group(0)):
            return tag.group(0)
        return attr_pattern.sub(r"\1\2", tag.group(0))

    return patterns.TAG_RE.sub(_rewrite_tag, html)


def remove_http_protocol(html: str, options: CompressorOptions) -> str:
    if options.remove_http_protocol:
        html = _strip_protocol(html, patterns.HTTP_ATTR_RE)
    return html


def remove_https_protocol(html: str, options: CompressorOptions) -> str:
    if options.remove_https_protocol:
        html = _strip_protocol(html, patterns.HTTPS_ATTR_RE)
    return html


def remove_intertag_spaces(html: str, options: CompressorOptions) -> str:
    """Drop whitespace between tags, and between tags and placeholder tokens."""
    if options.remove_intertag_spaces:
        html = patterns.INTERTAG_TAG_TAG_RE.sub("><", html)
        html = patterns.INTERTAG_TAG_TOKEN_RE.sub(">", html)
        html = patterns.INTERTAG_TOKEN_TAG_RE.sub(r"\1<", html)
        html = patterns.INTERTAG_TOKEN_TOKEN_RE.sub(r"\1", html)
    return html


def remove_multi_spaces(html: str, options: CompressorOptions) -> str:
    if options.remove_multi_spaces:
        html = patterns.MULTI_SPACE_RE.sub(" ", html)
    return html


def _tag_end(match: re.Match[str]) -> str:
    head, end = match.group(1), match.group(2)
    # <img src=a /> must not become <img src=a/>
    if end == "/>" and patterns.UNQUOTED_VALUE_END_RE.search(head):
        return f"{head} {end}"
    return head + end


def remove_spaces_inside_tags(html: str, options: CompressorOptions) -> str:
    """Remove spaces around ``=`` and before ``>`` / ``/>``. Always applied."""
    html = patterns.TAG_PROPERTY_RE.sub(r"\1=", html)
    html = patterns.TAG_END_SPACE_RE.sub(_tag_end, html)
    return html


def _unquote(match: re.Match[str]) -> str:
    value, slash = match.group(2), match.group(3)
    if not slash:
        return f"={value}"
    return f"={value} {slash}"


def remove_quotes_inside_tags(html: str, options: CompressorOptions) -> str:
    if options.remove_quotes:
        html = patterns.TAG_QUOTE_RE.sub(_unquote, html)
    return html


def remove_surrounding_spaces(html: str, options: CompressorOptions) -> str:
    pattern = options.surrounding_pattern
    if pattern is not None:
        html = pattern.sub(r"\1", html)
    return html


PIPELINE = (
    remove_comments,
    simple_doctype,
    remove_script_attributes,
    remove_style_attributes,
    remove_link_attributes,
    remove_form_attributes,
    remove_input_attributes,
    simple_boolean_attributes,
    remove_http_protocol,
    remove_https_protocol,
    remove_intertag_spaces,
    remove_multi_spaces,
    remove_spaces_inside_tags,
    remove_quotes_inside_tags,
    remove_surrounding_spaces,
)


def process_html(html: str, options: CompressorOptions) -> str:
    """Run the whole residual pipeline and trim the result."""
    for step in PIPELINE:
        html = step(html, options)
    return html.strip()
