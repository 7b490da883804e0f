"""Precompiled patterns shared by the HTML and XML compressors."""

from __future__ import annotations

import functools
import re

_FLAGS = re.DOTALL | re.IGNORECASE

# --- Predefined user preservation patterns (pass inside ``preserve_patterns``) ---
PHP_TAG_PATTERN = re.compile(r"<\?.*?\?>", _FLAGS)                    # <?php ... ?> and <? ... ?>
SERVER_SCRIPT_TAG_PATTERN = re.compile(r"<%.*?%>", re.DOTALL)          # <% ... %>
SERVER_SIDE_INCLUDE_PATTERN = re.compile(r"<!--\s*#.*?-->", re.DOTALL)  # <!--# ... -->

# --- Surrounding-space presets ---
BLOCK_TAGS_MIN = "html,head,body,br,p"
BLOCK_TAGS_MAX = (
    BLOCK_TAGS_MIN
    + ",h1,h2,h3,h4,h5,h6,blockquote,center,dl,fieldset,form,frame,frameset,"
    "hr,noframes,ol,table,tbody,tr,td,th,tfoot,thead,ul"
)
ALL_TAGS = "all"

# --- Protected regions ---
SKIP_RE = re.compile(r"<!--\s*\{\{\{\s*-->(.*?)<!--\s*\}\}\}\s*-->", _FLAGS)
COND_COMMENT_RE = re.compile(r"(<!(?:--)?\[[^\]]+?]>)(.*?)(<!(?:--)?\[[^\]]+]-->)", _FLAGS)
EVENT_DOUBLE_QUOTED_RE = re.compile(
    r"(\son[a-z]+\s*=\s*\")([^\"\\\r\n]*(?:\\.[^\"\\\r\n]*)*)(\")", re.IGNORECASE
)
EVENT_SINGLE_QUOTED_RE = re.compile(
    r"(\son[a-z]+\s*=\s*')([^'\\\r\n]*(?:\\.[^'\\\r\n]*)*)(')", re.IGNORECASE
)
PRE_RE = re.compile(r"(<pre[^>]*?>)(.*?)(</pre>)", _FLAGS)
TEXTAREA_RE = re.compile(r"(<textarea[^>]*?>)(.*?)(</textarea>)", _FLAGS)
SCRIPT_RE = re.compile(r"(<script[^>]*?>)(.*?)(</script>)", _FLAGS)
STYLE_RE = re.compile(r"(<style[^>]*?>)(.*?)(</style>)", _FLAGS)
LINE_BREAK_RE = re.compile(r"(?:[ \t]*(\r?\n)[ \t]*)+")
CDATA_WRAPPER_RE = re.compile(r"\s*<!\[CDATA\[(.*?)\]\]>\s*", _FLAGS)
CDATA_BLOCK_RE = re.compile(r"<!\[CDATA\[.*?\]\]>", _FLAGS)

# Script types whose body is a client-side template, not JavaScript.
TEMPLATE_SCRIPT_TAG_RE = re.compile(
    r"<script[^>]*type\s*=\s*([\"']*)text/(?:x-jquery-tmpl|x-handlebars-template|x-template)\1[^>]*>",
    _FLAGS,
)

# --- Residual transformations ---
COMMENT_RE = re.compile(r"<!---->|<!--[^\[].*?-->", _FLAGS)
XML_COMMENT_RE = re.compile(r"<!--.*?-->", _FLAGS)
DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", _FLAGS)
SIMPLE_DOCTYPE = "<!DOCTYPE html>"

JS_TYPE_ATTR_RE = re.compile(
    r"(<script[^>]*)type\s*=\s*([\"']*)(?:text|application)/javascript\2([^>]*>)", _FLAGS
)
JS_LANGUAGE_ATTR_RE = re.compile(r"(<script[^>]*)language\s*=\s*([\"']*)javascript\2([^>]*>)", _FLAGS)
STYLE_TYPE_ATTR_RE = re.compile(r"(<style[^>]*)type\s*=\s*([\"']*)text/(?:css|style)\2([^>]*>)", _FLAGS)
LINK_TYPE_ATTR_RE = re.compile(r"(<link[^>]*)type\s*=\s*([\"']*)text/(?:css|plain)\2([^>]*>)", _FLAGS)
LINK_REL_STYLESHEET_RE = re.compile(
    r"<link(?:[^>]*)rel\s*=\s*([\"']*)(?:alternate\s+)?stylesheet\1(?:[^>]*)>", _FLAGS
)
FORM_METHOD_ATTR_RE = re.compile(r"(<form[^>]*)method\s*=\s*([\"']*)get\2([^>]*>)", _FLAGS)
INPUT_TYPE_ATTR_RE = re.compile(r"(<input[^>]*)type\s*=\s*([\"']*)text\2([^>]*>)", _FLAGS)

TAG_RE = re.compile(r"<\w[^>]*>", _FLAGS)
BOOLEAN_ATTR_RE = re.compile(
    r"(\s)(checked|selected|disabled|readonly)\s*=\s*([\"']?)\w*\3(?=[\s/>])", re.IGNORECASE
)
HTTP_ATTR_RE = re.compile(r"((?:href|src|cite|action)\s*=\s*['\"])http:(//)", re.IGNORECASE)
HTTPS_ATTR_RE = re.compile(r"((?:href|src|cite|action)\s*=\s*['\"])https:(//)", re.IGNORECASE)
REL_EXTERNAL_RE = re.compile(
    r"<(?:[^>]*)rel\s*=\s*([\"']*)(?:alternate\s+)?external\1(?:[^>]*)>", _FLAGS
)
EVENT_JS_PROTOCOL_RE = re.compile(r"javascript:\s*(.+)", _FLAGS)

INTERTAG_TAG_TAG_RE = re.compile(r">\s+<")
# Escaped "~" characters are document text, not blocks; they are excluded.
_BLOCK_TOKEN_START = r"%%%~COMPRESS~(?!ESCAPE~)"
_BLOCK_TOKEN = _BLOCK_TOKEN_START + r"\w+?~\d+~%%%"
INTERTAG_TAG_TOKEN_RE = re.compile(r">\s+(?=" + _BLOCK_TOKEN_START + ")")
INTERTAG_TOKEN_TAG_RE = re.compile("(" + _BLOCK_TOKEN + r")\s+<")
INTERTAG_TOKEN_TOKEN_RE = re.compile("(" + _BLOCK_TOKEN + r")\s+(?=" + _BLOCK_TOKEN_START + ")")
MULTI_SPACE_RE = re.compile(r"\s+")
TAG_PROPERTY_RE = re.compile(r"(\s\w+)\s*=\s*(?=[^<]*?>)", re.IGNORECASE)
TAG_END_SPACE_RE = re.compile(r"(<(?:[^>]+?))(?:\s+?)(/?>)", _FLAGS)
UNQUOTED_VALUE_END_RE = re.compile(r"=[^\s\"'=<>`]+$")
TAG_QUOTE_RE = re.compile(r"\s*=\s*([\"'])([a-z0-9_-]+?)\1(/?)(?=[^<]*?>)", re.IGNORECASE)
WHITESPACE_CHAR_RE = re.compile(r"\s")

SURROUNDING_SPACES_ALL_RE = re.compile(r"\s*(<[^>]+>)\s*", _FLAGS)

_SURROUNDING_ALIASES = {
    "min": BLOCK_TAGS_MIN,
    "max": BLOCK_TAGS_MAX,
}


def _surrounding_tags_pattern(tags: str) -> re.Pattern[str]:
    names = [name.strip() for name in tags.split(",") if name.strip()]
    if not names:
        raise ValueError(f"Invalid surrounding-spaces tag list '{tags}'")
    alternation = "|".join(re.escape(name) for name in names)
    return re.compile(r"\s*(</?(?:" + alternation + r")(?:>|[\s/][^>]*>))\s*", _FLAGS)


SURROUNDING_SPACES_MIN_RE = _surrounding_tags_pattern(BLOCK_TAGS_MIN)
SURROUNDING_SPACES_MAX_RE = _surrounding_tags_pattern(BLOCK_TAGS_MAX)


@functools.lru_cache(maxsize=64)
def surrounding_spaces_pattern(value: str) -> re.Pattern[str]:
    """Resolve a surrounding-spaces setting to its pattern.

    Accepts ``min``, ``max`` or ``all`` (case-insensitive), the preset
    strings :data:`BLOCK_TAGS_MIN` / :data:`BLOCK_TAGS_MAX` /
    :data:`ALL_TAGS`, or a comma-separated list of tag names.

    Raises:
        ValueError: If the value names no tags.
    """
    key = value.strip().lower()
    key = _SURROUNDING_ALIASES.get(key, key)
    if key == ALL_TAGS:
        return SURROUNDING_SPACES_ALL_RE
    if key == BLOCK_TAGS_MIN:
        return SURROUNDING_SPACES_MIN_RE
    if key == BLOCK_TAGS_MAX:
        return SURROUNDING_SPACES_MAX_RE
    return _surrounding_tags_pattern(value)
