"""Tests for compressor configuration."""

import dataclasses
import re

import pytest

from markup_compressor import PHP_TAG_PATTERN, CompressorOptions, HtmlCompressor
from markup_compressor.minifiers import default_css_minifier, default_javascript_minifier
from markup_compressor.patterns import SURROUNDING_SPACES_ALL_RE, surrounding_spaces_pattern


class TestCompressorOptions:
    def test_defaults(self):
        options = CompressorOptions()
        assert options.enabled
        assert options.remove_comments
        assert options.remove_multi_spaces
        assert not options.remove_intertag_spaces
        assert not options.compress_javascript
        assert options.remove_surrounding_spaces is None
        assert options.surrounding_pattern is None
        assert options.preserve_patterns == ()
        assert options.javascript_minifier is default_javascript_minifier
        assert options.css_minifier is default_css_minifier

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CompressorOptions().remove_quotes = True

    def test_patterns_compiled_in_order(self):
        options = CompressorOptions(preserve_patterns=[r"\{\{.*?\}\}", PHP_TAG_PATTERN])
        assert isinstance(options.preserve_patterns, tuple)
        assert all(isinstance(p, re.Pattern) for p in options.preserve_patterns)
        assert options.preserve_patterns[1] is PHP_TAG_PATTERN

    def test_replace_keeps_patterns(self):
        options = CompressorOptions(preserve_patterns=[r"\{\{.*?\}\}"])
        copy = dataclasses.replace(options, generate_statistics=True)
        assert copy.preserve_patterns == options.preserve_patterns
        assert copy.generate_statistics

    def test_error_message_names_pattern(self):
        with pytest.raises(ValueError, match=r"Invalid regex pattern '\[bad'"):
            CompressorOptions(preserve_patterns=["[bad"])


class TestSurroundingSetting:
    @pytest.mark.parametrize("value", ["all", "ALL", " all "])
    def test_all_aliases(self, value: str):
        assert surrounding_spaces_pattern(value) is SURROUNDING_SPACES_ALL_RE

    def test_min_alias_matches_preset(self):
        assert surrounding_spaces_pattern("min") is surrounding_spaces_pattern("html,head,body,br,p")

    def test_custom_names_escaped(self):
        pattern = surrounding_spaces_pattern("my.tag")
        assert pattern.sub(r"\1", " <my.tag> ") == "<my.tag>"
        assert pattern.sub(r"\1", " <myxtag> ") == " <myxtag> "

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            surrounding_spaces_pattern(",,")


class TestHtmlCompressorConstruction:
    def test_keyword_overrides(self):
        compressor = HtmlCompressor(remove_quotes=True)
        assert compressor.options.remove_quotes

    def test_options_with_overrides(self):
        base = CompressorOptions(remove_intertag_spaces=True)
        compressor = HtmlCompressor(base, remove_quotes=True)
        assert compressor.options.remove_intertag_spaces
        assert compressor.options.remove_quotes
        assert not base.remove_quotes

    def test_options_reused(self):
        options = CompressorOptions()
        assert HtmlCompressor(options).options is options
