"""Size accounting gathered during a compression run."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(slots=True)
class HtmlMetrics:
    """Sizes measured on one side (before or after) of a run."""

    filesize: int = 0
    empty_chars: int = 0           # whitespace characters in the document
    inline_script_size: int = 0    # summed length of <script> bodies
    inline_style_size: int = 0     # summed length of <style> bodies
    inline_event_size: int = 0     # summed length of on*="..." handler values

    def __str__(self) -> str:
        return (
            f"Filesize={self.filesize}, Empty Chars={self.empty_chars}, "
            f"Script Size={self.inline_script_size}, Style Size={self.inline_style_size}, "
            f"Event Handler Size={self.inline_event_size}"
        )


@dataclasses.dataclass(slots=True)
class CompressionStatistics:
    """Statistics of the last run of an :class:`~markup_compressor.HtmlCompressor`."""

    original_metrics: HtmlMetrics = dataclasses.field(default_factory=HtmlMetrics)
    compressed_metrics: HtmlMetrics = dataclasses.field(default_factory=HtmlMetrics)
    time: float = 0.0              # elapsed milliseconds
    preserved_size: int = 0        # characters passed through untouched

    def __str__(self) -> str:
        return (
            f"Time={self.time:.3f}ms, Preserved={self.preserved_size}, "
            f"Original={{{self.original_metrics}}}, Compressed={{{self.compressed_metrics}}}"
        )


@dataclasses.dataclass(frozen=True, slots=True)
class CompressionResult:
    """Result of compression with size statistics."""

    text: str                                   # the compressed document
    original_length: int                        # len(original input)
    compressed_length: int                      # len(text)
    ratio: float                                # compressed_length / original_length (0.0–1.0)
    savings_pct: float                          # (1 - ratio) * 100
    statistics: CompressionStatistics | None    # None when the input was empty or compression disabled

    def __str__(self) -> str:
        return self.text
