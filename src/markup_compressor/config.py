"""Compressor configuration."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Sequence

from markup_compressor.minifiers import Minifier, default_css_minifier, default_javascript_minifier
from markup_compressor.patterns import surrounding_spaces_pattern


def compile_preserve_patterns(
    patterns: Sequence[str | re.Pattern[str]] | None,
) -> tuple[re.Pattern[str], ...]:
    """Compile user preservation patterns, keeping their order.

    Raises:
        ValueError: If a pattern string is not a valid regex.
    """
    if not patterns:
        return ()
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        if isinstance(pattern, str):
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise ValueError(f"Invalid regex pattern '{pattern}': {e}") from e
        else:
            compiled.append(pattern)
    return tuple(compiled)


@dataclasses.dataclass(frozen=True, slots=True)
class CompressorOptions:
    """Settings for one :class:`~markup_compressor.HtmlCompressor`.

    Instances are immutable; derive variants with :func:`dataclasses.replace`.
    ``preserve_patterns`` may hold strings or compiled patterns and is
    compiled on construction, so a malformed regex fails here rather than
    on the first ``compress`` call. Patterns are matched after ``~``
    characters have been replaced by placeholders, so a pattern should not
    name ``~`` literally.
    """

    enabled: bool = True

    # default settings
    remove_comments: bool = True
    remove_multi_spaces: bool = True

    # optional settings
    remove_intertag_spaces: bool = False
    remove_quotes: bool = False
    preserve_line_breaks: bool = False
    remove_surrounding_spaces: str | None = None   # "min", "max", "all" or "p,br,..."
    simple_doctype: bool = False
    remove_script_attributes: bool = False
    remove_style_attributes: bool = False
    remove_link_attributes: bool = False
    remove_form_attributes: bool = False
    remove_input_attributes: bool = False
    simple_boolean_attributes: bool = False
    remove_javascript_protocol: bool = False
    remove_http_protocol: bool = False
    remove_https_protocol: bool = False
    compress_javascript: bool = False
    compress_css: bool = False
    generate_statistics: bool = False

    preserve_patterns: Sequence[str | re.Pattern[str]] = ()
    javascript_minifier: Minifier = default_javascript_minifier
    css_minifier: Minifier = default_css_minifier

    def __post_init__(self) -> None:
        object.__setattr__(self, "preserve_patterns", compile_preserve_patterns(self.preserve_patterns))
        if self.remove_surrounding_spaces is not None:
            surrounding_spaces_pattern(self.remove_surrounding_spaces)

    @property
    def surrounding_pattern(self) -> re.Pattern[str] | None:
        if self.remove_surrounding_spaces is None:
            return None
        return surrounding_spaces_pattern(self.remove_surrounding_spaces)
