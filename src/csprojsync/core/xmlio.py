"""Reading, parsing and byte-exact writing of project descriptor XML.

Project files are parsed with the hardened ``defusedxml`` parser. Legacy
MSBuild projects declare a default namespace
(``http://schemas.microsoft.com/developer/msbuild/2003``); the parser folds it
out of every tag so lookups can use bare names such as ``ItemGroup``, and
keeps it as a plain ``xmlns`` attribute on the root so the written file
declares the same namespace without ``ns0:`` prefixes.

Serialization always produces:

* a UTF-8 byte order mark,
* an ``<?xml version="1.0" encoding="utf-8"?>`` declaration,
* CRLF line endings and no newline after the closing root tag.

Example
-------
>>> tree = parse_project('<Project><ItemGroup /></Project>')
>>> serialize_project(tree)[:3] == b"\\xef\\xbb\\xbf"
True
"""

from __future__ import annotations

import copy
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser, ParseError

from .types import ProjectParseError

logger = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
MSBUILD_NAMESPACE = "http://schemas.microsoft.com/developer/msbuild/2003"

_TRAILING_NEWLINE = re.compile(r"\r?\n$")


def _split_namespace(tag: str) -> tuple[Optional[str], str]:
    if tag.startswith("{") and "}" in tag:
        uri, local = tag[1:].split("}", 1)
        return uri, local
    return None, tag


def _fold_default_namespace(root: ET.Element) -> None:
    uri, _ = _split_namespace(root.tag)
    if uri is None:
        return
    prefix = f"{{{uri}}}"
    for element in root.iter():
        # Comments and processing instructions carry callables as tags.
        if isinstance(element.tag, str) and element.tag.startswith(prefix):
            element.tag = element.tag[len(prefix):]
    root.set("xmlns", uri)


def strip_bom(text: str) -> str:
    if text.startswith(BYTE_ORDER_MARK):
        return text[len(BYTE_ORDER_MARK):]
    return text


def read_project_text(path: Union[str, Path]) -> str:
    """Return the decoded file content without a leading byte order mark."""

    path = Path(path)
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ProjectParseError(path, f"not valid UTF-8 ({exc.reason})") from exc
    return strip_bom(text)


def parse_project(text: str, *, source: Union[str, Path, None] = None) -> ET.ElementTree:
    """Parse project XML text into an ``ElementTree``.

    Comments are kept so rewriting a project does not drop them. ``source``
    only labels errors.
    """

    label = Path(source) if source is not None else Path("<string>")
    parser = DefusedXMLParser(
        target=ET.TreeBuilder(insert_comments=True, insert_pis=True),
    )
    try:
        parser.feed(strip_bom(text))
        root = parser.close()
    except ParseError as exc:
        raise ProjectParseError(label, f"malformed XML ({exc})") from exc
    except DefusedXmlException as exc:
        raise ProjectParseError(label, f"rejected unsafe XML ({exc})") from exc
    _fold_default_namespace(root)
    return ET.ElementTree(root)


def load_project(path: Union[str, Path]) -> ET.ElementTree:
    path = Path(path)
    logger.debug("Parsing project file %s", path)
    return parse_project(read_project_text(path), source=path)


def render_project(tree: ET.ElementTree, indent: int = 2) -> str:
    """Render the document as text with LF line endings.

    The tree passed in is left untouched; indentation is applied to a copy.
    """

    if indent < 0:
        raise ValueError("indent must be zero or greater")
    root = copy.deepcopy(tree.getroot())
    ET.indent(root, space=" " * indent)
    body = ET.tostring(root, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}\n"


def serialize_project(tree: ET.ElementTree, indent: int = 2) -> bytes:
    """Return the on-disk bytes for ``tree``: BOM, CRLF, no trailing newline."""

    text = BYTE_ORDER_MARK + render_project(tree, indent=indent)
    text = text.replace("\r\n", "\n").replace("\n", "\r\n")
    text = _TRAILING_NEWLINE.sub("", text)
    return text.encode("utf-8")
