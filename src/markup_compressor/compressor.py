"""HTML compression: protect blocks, rewrite the rest, restore the blocks."""

from __future__ import annotations

import dataclasses
import logging
import re
import time
from collections.abc import Callable
from typing import Any

from markup_compressor import patterns
from markup_compressor.config import CompressorOptions
from markup_compressor.minifiers import Minifier, minify_block
from markup_compressor.placeholders import (
    Category,
    ProtectedBlock,
    escape_separators,
    extract,
    restore,
    unescape_separators,
)
from markup_compressor.stats import CompressionResult, CompressionStatistics
from markup_compressor.transforms import process_html

logger = logging.getLogger(__name__)

# Tag-wrapped categories in extraction order; restored in reverse.
_TAG_BLOCKS: tuple[tuple[Category, re.Pattern[str]], ...] = (
    (Category.PRE, patterns.PRE_RE),
    (Category.SCRIPT, patterns.SCRIPT_RE),
    (Category.STYLE, patterns.STYLE_RE),
    (Category.TEXTAREA, patterns.TEXTAREA_RE),
)


@dataclasses.dataclass(slots=True)
class _Preserved:
    """Blocks pulled out of one document, per category."""

    user: list[list[ProtectedBlock]] = dataclasses.field(default_factory=list)
    by_category: dict[Category, list[ProtectedBlock]] = dataclasses.field(default_factory=dict)

    def get(self, category: Category) -> list[ProtectedBlock]:
        return self.by_category.setdefault(category, [])

    def count(self) -> int:
        return sum(map(len, self.by_category.values())) + sum(map(len, self.user))


def _is_script(match: re.Match[str]) -> bool:
    return not patterns.TEMPLATE_SCRIPT_TAG_RE.fullmatch(match.group(1))


def _count_whitespace(text: str) -> int:
    return len(patterns.WHITESPACE_CHAR_RE.findall(text))


def _total(blocks: list[ProtectedBlock], escaped: list[ProtectedBlock]) -> int:
    """Summed length of *blocks* as they appear in the input."""
    return sum(len(unescape_separators(block.text, escaped)) for block in blocks)


class HtmlCompressor:
    """Compresses HTML by removing comments, extra spaces and redundant
    attribute syntax while preserving ``<pre>``, ``<textarea>``,
    ``<script>`` and ``<style>`` content, inline event handlers,
    conditional comments, ``<!-- {{{ -->...<!-- }}} -->`` regions and any
    user-supplied preservation patterns.

    Script and style bodies can additionally be passed through the
    configured JavaScript/CSS minifiers.

    With ``generate_statistics`` on, :attr:`statistics` holds the record of
    the last :meth:`compress` call; such an instance must not be shared
    between threads.
    """

    def __init__(self, options: CompressorOptions | None = None, **overrides: Any) -> None:
        if options is None:
            options = CompressorOptions(**overrides)
        elif overrides:
            options = dataclasses.replace(options, **overrides)
        self.options = options
        self.statistics: CompressionStatistics | None = None

    def compress(self, html: str | None) -> str | None:
        """Compress *html* and return the result.

        Disabled compression, ``None`` and ``""`` are returned unchanged.
        """
        if not self.options.enabled or not html:
            return html

        started = time.perf_counter()
        statistics = self._init_statistics(html)

        html, escaped = escape_separators(html)
        html = self._compress(html, escaped, statistics)
        html = unescape_separators(html, escaped)

        if statistics is not None:
            statistics.time = (time.perf_counter() - started) * 1000
            statistics.compressed_metrics.filesize = len(html)
            statistics.compressed_metrics.empty_chars = _count_whitespace(html)
        self.statistics = statistics
        return html

    def _compress(
        self,
        html: str,
        escaped: list[ProtectedBlock],
        statistics: CompressionStatistics | None = None,
    ) -> str:
        """Compress an already escaped document, leaving the escapes in place."""
        html, preserved = self._preserve_blocks(html, escaped)
        html = process_html(html, self.options)
        self._process_preserved_blocks(preserved, escaped, statistics)
        return self._return_blocks(html, preserved)

    def _init_statistics(self, html: str) -> CompressionStatistics | None:
        if not self.options.generate_statistics:
            return None
        statistics = CompressionStatistics()
        statistics.original_metrics.filesize = len(html)
        statistics.original_metrics.empty_chars = _count_whitespace(html)
        return statistics

    def _condition_compressor(self) -> HtmlCompressor:
        return HtmlCompressor(dataclasses.replace(self.options, generate_statistics=False))

    def _preserve_blocks(self, html: str, escaped: list[ProtectedBlock]) -> tuple[str, _Preserved]:
        options = self.options
        preserved = _Preserved()

        for position, pattern in enumerate(options.preserve_patterns):
            html, user_blocks = extract(Category.USER, pattern, html, position=position)
            preserved.user.append(user_blocks)

        # <!-- {{{ --> markers are dropped, only their content comes back
        html, _ = extract(
            Category.SKIP, patterns.SKIP_RE, html,
            group=1, whole=True, blocks=preserved.get(Category.SKIP),
        )

        # conditional comment payloads go through a copy of this pipeline
        inner = self._condition_compressor()
        html, _ = extract(
            Category.COND, patterns.COND_COMMENT_RE, html,
            group=2, whole=True, blocks=preserved.get(Category.COND),
            transform=lambda m: m.group(1) + inner._compress(m.group(2), escaped) + m.group(3),
        )

        events = preserved.get(Category.EVENT)
        html, _ = extract(Category.EVENT, patterns.EVENT_DOUBLE_QUOTED_RE, html, group=2, blocks=events)
        html, _ = extract(Category.EVENT, patterns.EVENT_SINGLE_QUOTED_RE, html, group=2, blocks=events)

        for category, pattern in _TAG_BLOCKS:
            html, _ = extract(
                category, pattern, html,
                group=2, blocks=preserved.get(category),
                accept=_is_script if category is Category.SCRIPT else None,
            )

        if options.preserve_line_breaks:
            html, _ = extract(
                Category.LINE_BREAK, patterns.LINE_BREAK_RE, html,
                group=1, whole=True, skip_blank=False, blocks=preserved.get(Category.LINE_BREAK),
            )

        logger.debug("Preserved %d blocks", preserved.count())
        return html, preserved

    def _process_preserved_blocks(
        self,
        preserved: _Preserved,
        escaped: list[ProtectedBlock],
        statistics: CompressionStatistics | None,
    ) -> None:
        options = self.options

        if statistics is not None:
            for category in (Category.PRE, Category.TEXTAREA, Category.COND, Category.SKIP, Category.LINE_BREAK):
                statistics.preserved_size += _total(preserved.get(category), escaped)
            for user_blocks in preserved.user:
                statistics.preserved_size += _total(user_blocks, escaped)

        def _minify(minifier: Minifier, kind: str) -> Callable[[str], str]:
            # minifiers see the real characters; their output is shielded again
            def rewrite(source: str) -> str:
                result = minify_block(minifier, unescape_separators(source, escaped), kind)
                return escape_separators(result, escaped)[0]
            return rewrite

        self._process_category(
            preserved.get(Category.SCRIPT),
            options.compress_javascript,
            _minify(options.javascript_minifier, "javascript"),
            escaped,
            statistics,
            "inline_script_size",
        )
        self._process_category(
            preserved.get(Category.STYLE),
            options.compress_css,
            _minify(options.css_minifier, "css"),
            escaped,
            statistics,
            "inline_style_size",
        )
        self._process_category(
            preserved.get(Category.EVENT),
            options.remove_javascript_protocol,
            _remove_javascript_protocol,
            escaped,
            statistics,
            "inline_event_size",
        )
        if statistics is not None and options.remove_javascript_protocol:
            # handler bodies survive protocol stripping as-is
            statistics.preserved_size += _total(preserved.get(Category.EVENT), escaped)

    @staticmethod
    def _process_category(
        blocks: list[ProtectedBlock],
        enabled: bool,
        rewrite: Callable[[str], str],
        escaped: list[ProtectedBlock],
        statistics: CompressionStatistics | None,
        metric: str,
    ) -> None:
        if statistics is not None:
            metrics = statistics.original_metrics
            setattr(metrics, metric, getattr(metrics, metric) + _total(blocks, escaped))

        if enabled:
            for i, block in enumerate(blocks):
                blocks[i] = dataclasses.replace(block, text=rewrite(block.text))
        elif statistics is not None:
            statistics.preserved_size += _total(blocks, escaped)

        if statistics is not None:
            metrics = statistics.compressed_metrics
            setattr(metrics, metric, getattr(metrics, metric) + _total(blocks, escaped))

    def _return_blocks(self, html: str, preserved: _Preserved) -> str:
        if self.options.preserve_line_breaks:
            html = restore(Category.LINE_BREAK, html, preserved.get(Category.LINE_BREAK))

        for category, _ in reversed(_TAG_BLOCKS):
            html = restore(category, html, preserved.get(category))

        for category in (Category.EVENT, Category.COND, Category.SKIP):
            html = restore(category, html, preserved.get(category))

        for position in range(len(preserved.user) - 1, -1, -1):
            html = restore(Category.USER, html, preserved.user[position], position=position)

        return html


def _remove_javascript_protocol(source: str) -> str:
    """``javascript: foo()`` -> ``foo()`` for an inline event handler."""
    match = patterns.EVENT_JS_PROTOCOL_RE.fullmatch(source)
    if match:
        return match.group(1)
    return source


def compress(html: str, **options: Any) -> str:
    """Compress *html* with :class:`CompressorOptions` given as keywords.

    Raises:
        ValueError: If a preserve pattern string is not a valid regex, or
            the surrounding-spaces setting names no tags.
    """
    return HtmlCompressor(CompressorOptions(**options)).compress(html)


def compress_with_stats(html: str, **options: Any) -> CompressionResult:
    """Compress *html* and return the result with size statistics.

    Raises:
        ValueError: Same conditions as :func:`compress`.
    """
    options["generate_statistics"] = True
    compressor = HtmlCompressor(CompressorOptions(**options))
    text = compressor.compress(html) or ""

    original_length = len(html) if html else 0
    compressed_length = len(text)
    ratio = compressed_length / original_length if original_length > 0 else 1.0

    return CompressionResult(
        text=text,
        original_length=original_length,
        compressed_length=compressed_length,
        ratio=ratio,
        savings_pct=(1 - ratio) * 100,
        statistics=compressor.statistics,
    )
