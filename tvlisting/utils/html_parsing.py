"""
HTML parsing helpers built on lxml.

Selectors are compiled once with cssselect and applied to lxml.html trees.
"""
import logging
from functools import lru_cache
from typing import Optional

import lxml.html
from lxml import etree
from lxml.cssselect import CSSSelector

from tvlisting.errors import ParsingWebsiteError


logger = logging.getLogger(__name__)


def parse_document(markup: bytes, encoding: Optional[str] = None) -> lxml.html.HtmlElement:
    """
    Parse an HTML document from its raw bytes

    Args:
        markup: Undecoded document body
        encoding: Charset announced by the server, None lets lxml detect it

    Raises:
        ParsingWebsiteError: If the markup is empty or cannot be parsed
    """
    try:
        parser = lxml.html.HTMLParser(encoding=encoding) if encoding else None
        return lxml.html.document_fromstring(markup, parser=parser)
    except (etree.LxmlError, ValueError, LookupError) as e:
        logger.error(f"  HTML parsing error: {e}")
        raise ParsingWebsiteError() from e


@lru_cache(maxsize=None)
def selector(css: str) -> CSSSelector:
    """Compile and cache a CSS selector"""
    return CSSSelector(css)


def select_all(element: etree._Element, css: str) -> list[lxml.html.HtmlElement]:
    """Return all descendants matching the selector, in document order"""
    return selector(css)(element)


def select_first(element: etree._Element, css: str) -> Optional[lxml.html.HtmlElement]:
    """Return the first descendant matching the selector, or None"""
    matches = selector(css)(element)
    return matches[0] if matches else None


def get_text(element: etree._Element, css: str) -> Optional[str]:
    """Text content of the first match, or None if nothing matches"""
    match = select_first(element, css)
    if match is None:
        return None
    return match.text_content()


def get_attribute(element: etree._Element, css: str, name: str) -> Optional[str]:
    """Attribute of the first match, or None if nothing matches or the attribute is missing"""
    match = select_first(element, css)
    if match is None:
        return None
    return match.get(name)
