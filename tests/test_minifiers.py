"""Tests for the JavaScript/CSS minifier wrappers."""

import logging

from markup_compressor.minifiers import (
    css_minifier,
    default_css_minifier,
    default_javascript_minifier,
    javascript_minifier,
    minify_block,
)


class TestMinifyBlock:
    def test_plain_block(self):
        assert minify_block(str.upper, "var a;") == "VAR A;"

    def test_cdata_wrapper_restored(self):
        assert minify_block(str.upper, "\n<![CDATA[\nvar a;\n]]>\n") == "<![CDATA[\nVAR A;\n]]>"

    def test_exception_keeps_source(self, caplog):
        def broken(source: str) -> str:
            raise ValueError("bad input")

        with caplog.at_level(logging.WARNING, logger="markup_compressor.minifiers"):
            assert minify_block(broken, "a { }", "css") == "a { }"
        assert "css minifier failed" in caplog.text

    def test_non_string_result_keeps_source(self, caplog):
        with caplog.at_level(logging.WARNING, logger="markup_compressor.minifiers"):
            assert minify_block(lambda s: None, "var a;") == "var a;"
        assert "NoneType" in caplog.text


class TestDefaultMinifiers:
    def test_javascript(self):
        assert "var a=1" in default_javascript_minifier("var  a = 1 ;")

    def test_javascript_bang_comments_dropped(self):
        assert "keep" not in default_javascript_minifier("/*! keep */\nvar a = 1;")

    def test_javascript_bang_comments_kept(self):
        assert "/*! keep */" in javascript_minifier(keep_bang_comments=True)("/*! keep */\nvar a = 1;")

    def test_css(self):
        assert "p{color:red" in default_css_minifier("p {\n  color : red;\n}")

    def test_css_bang_comments_kept(self):
        assert "/*! keep */" in css_minifier(keep_bang_comments=True)("/*! keep */ p { color: red; }")
