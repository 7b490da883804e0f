"""Markup Compressor - Minify HTML and XML while keeping protected blocks intact."""

from markup_compressor.compressor import HtmlCompressor, compress, compress_with_stats
from markup_compressor.config import CompressorOptions
from markup_compressor.minifiers import (
    Minifier,
    css_minifier,
    default_css_minifier,
    default_javascript_minifier,
    javascript_minifier,
)
from markup_compressor.patterns import (
    ALL_TAGS,
    BLOCK_TAGS_MAX,
    BLOCK_TAGS_MIN,
    PHP_TAG_PATTERN,
    SERVER_SCRIPT_TAG_PATTERN,
    SERVER_SIDE_INCLUDE_PATTERN,
)
from markup_compressor.stats import CompressionResult, CompressionStatistics, HtmlMetrics
from markup_compressor.xml_compressor import XmlCompressor, compress_xml

__version__ = "0.1.0"

__all__ = [
    "compress",
    "compress_with_stats",
    "compress_xml",
    "HtmlCompressor",
    "XmlCompressor",
    "CompressorOptions",
    "CompressionResult",
    "CompressionStatistics",
    "HtmlMetrics",
    "Minifier",
    "javascript_minifier",
    "css_minifier",
    "default_javascript_minifier",
    "default_css_minifier",
    "PHP_TAG_PATTERN",
    "SERVER_SCRIPT_TAG_PATTERN",
    "SERVER_SIDE_INCLUDE_PATTERN",
    "BLOCK_TAGS_MIN",
    "BLOCK_TAGS_MAX",
    "ALL_TAGS",
]
