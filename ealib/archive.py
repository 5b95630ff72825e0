"""
Tagged, hierarchical text archives.

This module provides the reader and writer used by individuals,
representations, fitness values and metadata to persist themselves. An
archive is an XML document whose element names and element order form the
wire contract; every value is read back by naming the tag it is expected
under.
"""
import logging
import math
import os
import re
import xml.etree.ElementTree as ET
from typing import IO, Any, Iterator, Optional, Union

log = logging.getLogger("ealib.archive")

ARCHIVE_VERSION = 1

# Characters XML text cannot carry verbatim: control characters other than
# tab and newline (the parser folds \r into \n), surrogates and the two
# non-characters. They are written as \uXXXX; a literal backslash as \\.
_UNSAFE_CHARS = re.compile(r"[\\\x00-\x08\x0b-\x1f\ud800-\udfff\ufffe\uffff]")
_ESCAPE = re.compile(r"\\(\\|u[0-9a-fA-F]{4}|.?)", re.DOTALL)


class ArchiveError(ValueError):
    """Raised when an archive is malformed or does not match the expected layout."""


def escape_text(value: str) -> str:
    """Makes a string safe to store as XML text, reversibly."""
    def _escape(match):
        char = match.group(0)
        if char == "\\":
            return "\\\\"
        return f"\\u{ord(char):04x}"
    return _UNSAFE_CHARS.sub(_escape, value)


def unescape_text(text: str) -> str:
    """Reverses `escape_text`."""
    def _unescape(match):
        code = match.group(1)
        if code == "\\":
            return "\\"
        if code.startswith("u") and len(code) == 5:
            return chr(int(code[1:], 16))
        raise ArchiveError(f"Invalid escape sequence in archive text: {match.group(0)!r}")
    return _ESCAPE.sub(_unescape, text)


def format_float(value: float) -> str:
    """
    Renders a float so that parsing it back yields the same value.

    Args:
        value (float): The value to render.

    Returns:
        str: The shortest round-trip text form ('nan', 'inf' and '-inf'
        for the non-finite values).
    """
    value = float(value)
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return repr(value)


class ArchiveWriter:
    """
    Writes named values as child elements of an XML element.

    Args:
        element (ET.Element): The element that receives the written values.
    """

    def __init__(self, element: ET.Element):
        self._element = element

    @property
    def element(self) -> ET.Element:
        return self._element

    def write_str(self, tag: str, value: str):
        child = ET.SubElement(self._element, tag)
        child.text = escape_text(value)

    def write_int(self, tag: str, value: int):
        self.write_str(tag, str(int(value)))

    def write_float(self, tag: str, value: float):
        self.write_str(tag, format_float(value))

    def write_bool(self, tag: str, value: bool):
        self.write_str(tag, "1" if value else "0")

    def write_nested(self, tag: str, obj: Any):
        """
        Writes a nested structure by handing a child writer to `obj.save`.
        """
        child = ET.SubElement(self._element, tag)
        obj.save(ArchiveWriter(child))


class ArchiveReader:
    """
    Reads named values from the child elements of an XML element, in order.

    Each read consumes the next child element and fails if its tag is not the
    one asked for.

    Args:
        element (ET.Element): The element whose children are read.
    """

    def __init__(self, element: ET.Element):
        self._element = element
        self._children: Iterator[ET.Element] = iter(list(element))
        self._pending: Optional[ET.Element] = None

    @property
    def element(self) -> ET.Element:
        return self._element

    def _peek(self) -> Optional[ET.Element]:
        if self._pending is None:
            self._pending = next(self._children, None)
        return self._pending

    def _next(self, tag: str) -> ET.Element:
        child = self._peek()
        if child is None:
            raise ArchiveError(f"Expected <{tag}> in <{self._element.tag}>, found end of element.")
        if child.tag != tag:
            raise ArchiveError(f"Expected <{tag}> in <{self._element.tag}>, found <{child.tag}>.")
        self._pending = None
        return child

    def has_next(self, tag: str) -> bool:
        """Returns True if the next unread element carries `tag`."""
        child = self._peek()
        return child is not None and child.tag == tag

    def read_str(self, tag: str) -> str:
        child = self._next(tag)
        if len(child):
            raise ArchiveError(f"Expected a scalar value in <{tag}>, found nested elements.")
        return unescape_text(child.text or "")

    def read_int(self, tag: str) -> int:
        text = self.read_str(tag).strip()
        try:
            return int(text)
        except ValueError:
            raise ArchiveError(f"Invalid integer in <{tag}>: {text!r}") from None

    def read_float(self, tag: str) -> float:
        text = self.read_str(tag).strip()
        try:
            return float(text)
        except ValueError:
            raise ArchiveError(f"Invalid float in <{tag}>: {text!r}") from None

    def read_bool(self, tag: str) -> bool:
        text = self.read_str(tag).strip()
        if text in ("1", "true"):
            return True
        if text in ("0", "false"):
            return False
        raise ArchiveError(f"Invalid boolean in <{tag}>: {text!r}")

    def read_nested(self, tag: str, obj: Any) -> Any:
        """
        Reads a nested structure into `obj` by handing a child reader to
        `obj.load`. The nested element must be consumed completely.

        Returns:
            Any: `obj`, for chaining.
        """
        reader = ArchiveReader(self._next(tag))
        obj.load(reader)
        reader.finish()
        return obj

    def finish(self):
        """Raises ArchiveError if any child element was left unread."""
        child = self._peek()
        if child is not None:
            raise ArchiveError(f"Unexpected <{child.tag}> in <{self._element.tag}>.")


def _build(tag: str, obj: Any, indent: bool) -> ET.Element:
    root = ET.Element(tag, version=str(ARCHIVE_VERSION))
    obj.save(ArchiveWriter(root))
    if indent:
        ET.indent(root)
    return root


def dumps(tag: str, obj: Any, indent: bool = True) -> str:
    """
    Serializes `obj` into an XML document whose root element is `tag`.

    Args:
        tag (str): The name of the root element.
        obj (Any): An object exposing `save(writer)`.
        indent (bool): Whether to pretty-print the document.

    Returns:
        str: The XML document.
    """
    return ET.tostring(_build(tag, obj, indent), encoding="unicode") + "\n"


def parse(source: Union[str, bytes, IO], tag: str) -> ArchiveReader:
    """
    Parses an XML document and returns a reader positioned on its root.

    Args:
        source (Union[str, bytes, IO]): The document text, or an open stream.
        tag (str): The required name of the root element.

    Returns:
        ArchiveReader: A reader over the root element's children.
    """
    try:
        if isinstance(source, (str, bytes)):
            root = ET.fromstring(source)
        else:
            root = ET.parse(source).getroot()
    except ET.ParseError as e:
        raise ArchiveError(f"Malformed archive: {e}") from e

    if root.tag != tag:
        raise ArchiveError(f"Expected root element <{tag}>, found <{root.tag}>.")
    version = root.get("version", str(ARCHIVE_VERSION))
    if version != str(ARCHIVE_VERSION):
        raise ArchiveError(f"Unsupported archive version {version!r}.")
    log.debug("Parsed <%s> archive (version %s)", tag, version)
    return ArchiveReader(root)


def save_document(
    tag: str,
    obj: Any,
    out: Union[str, os.PathLike, IO[str]],
    indent: bool = True,
    encoding: str = "utf-8",
):
    """
    Writes `obj` as an XML document to a text stream or a file path.

    Args:
        tag (str): The name of the root element.
        obj (Any): An object exposing `save(writer)`.
        out (Union[str, os.PathLike, IO[str]]): A path, or an open text stream.
        indent (bool): Whether to pretty-print the document.
        encoding (str): The file encoding, used when `out` is a path.
    """
    root = _build(tag, obj, indent)
    if isinstance(out, (str, os.PathLike)):
        # Characters the encoding cannot hold become character references.
        with open(out, "wb") as f:
            ET.ElementTree(root).write(f, encoding=encoding, xml_declaration=True)
        log.debug("Wrote <%s> archive to %s", tag, out)
    else:
        out.write(ET.tostring(root, encoding="unicode") + "\n")


def load_document(source: Union[str, os.PathLike, IO], tag: str, obj: Any) -> Any:
    """
    Reads an XML document from a stream or a file path into `obj`.

    A path is opened before anything is parsed, so an unreadable path raises
    the underlying OSError. The file is closed on every exit path.

    Args:
        source (Union[str, os.PathLike, IO]): A path, or an open stream.
        tag (str): The required name of the root element.
        obj (Any): An object exposing `load(reader)`.

    Returns:
        Any: `obj`, loaded.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return load_document(f, tag, obj)
    ar = parse(source, tag)
    obj.load(ar)
    ar.finish()
    return obj
