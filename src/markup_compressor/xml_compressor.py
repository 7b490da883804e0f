"""XML compression: comments and inter-tag whitespace, CDATA left intact."""

from __future__ import annotations

from markup_compressor import patterns
from markup_compressor.placeholders import (
    Category,
    escape_separators,
    extract,
    restore,
    unescape_separators,
)


class XmlCompressor:
    """Removes comments and whitespace between tags from XML documents.

    ``<![CDATA[...]]>`` sections are passed through byte for byte.
    """

    def __init__(
        self,
        enabled: bool = True,
        remove_comments: bool = True,
        remove_intertag_spaces: bool = True,
    ) -> None:
        self.enabled = enabled
        self.remove_comments = remove_comments
        self.remove_intertag_spaces = remove_intertag_spaces

    def compress(self, xml: str | None) -> str | None:
        if not self.enabled or not xml:
            return xml

        xml, escaped = escape_separators(xml)
        xml, cdata_blocks = extract(Category.CDATA, patterns.CDATA_BLOCK_RE, xml, skip_blank=False)

        xml = self._process_xml(xml)

        xml = restore(Category.CDATA, xml, cdata_blocks)
        xml = unescape_separators(xml, escaped)
        return xml.strip()

    def _process_xml(self, xml: str) -> str:
        if self.remove_comments:
            xml = patterns.XML_COMMENT_RE.sub("", xml)
        if self.remove_intertag_spaces:
            xml = patterns.INTERTAG_TAG_TAG_RE.sub("><", xml)
        return xml


def compress_xml(xml: str | None, **options: bool) -> str | None:
    """Compress *xml*; keywords are passed to :class:`XmlCompressor`."""
    return XmlCompressor(**options).compress(xml)
