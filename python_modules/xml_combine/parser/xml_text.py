"""
Line-oriented XML text helpers

Root detection and declaration stripping work on raw lines with regular
expressions; documents are never parsed into a tree here. Everything that
inspects XML text for the merge goes through these functions.
"""

import codecs
import re
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

from xml_combine.utils.exceptions import ParsingException

XML_NAME = r"[A-Za-z_][\w.\-:]*"

DECLARATION_RE = re.compile(r"<\?xml\s[^>]*?\?>")
LEADING_DECLARATION_RE = re.compile(r"^\ufeff?\s*(<\?xml\s[^>]*?\?>)(.*)$", re.DOTALL)
OPENING_TAG_RE = re.compile(rf"^\s*<({XML_NAME})(?=[\s>/]|$)")
ROOT_NAME_RE = re.compile(rf"^{XML_NAME}$")
DECLARED_ENCODING_RE = re.compile(
    rb"^(?:\xef\xbb\xbf)?\s*<\?xml\s[^>]*?encoding\s*=\s*[\"']([A-Za-z][\w.\-]*)[\"']"
)
DECLARATION_PEEK = 1024


def split_declaration(line: str) -> Tuple[Optional[str], str]:
    """Split a leading XML declaration off a line: (declaration or None, rest)"""
    match = LEADING_DECLARATION_RE.match(line)
    if not match:
        return None, line
    return match.group(1), match.group(2)


def strip_declaration(line: str) -> str:
    """Remove any XML declaration from a line"""
    return DECLARATION_RE.sub("", line)


def content_lines(lines: Iterable[str]) -> Iterator[str]:
    """Lines with declarations removed, skipping lines left blank"""
    for line in lines:
        line = strip_declaration(line.lstrip("\ufeff"))
        if line.strip():
            yield line.rstrip("\r\n")


def detect_root_tag(lines: Iterable[str]) -> Optional[str]:
    """Name of the first element opening a line, or None"""
    for line in lines:
        match = OPENING_TAG_RE.match(line)
        if match:
            return match.group(1)
    return None


def rename_root(line: str, old_root: str, new_root: str) -> str:
    """Rename the element opening this line, leaving attributes and content alone"""
    return re.sub(
        rf"^(\s*<){re.escape(old_root)}(?=[\s>/]|$)",
        lambda match: f"{match.group(1)}{new_root}",
        line,
        count=1
    )


def isolate_root_tag(line: str, root: str) -> Optional[Tuple[str, str]]:
    """
    Split a line starting with the opening tag of root into (tag, rest)

    Returns None when the tag is not complete on this line or is self-closing.
    """
    match = re.match(rf"^\s*(<{re.escape(root)}(?:\s[^<]*?)?>)(.*)$", line, re.DOTALL)
    if not match or match.group(1).endswith("/>"):
        return None
    return match.group(1), match.group(2)


def closing_tag(root: str) -> str:
    return "</{}>".format(root.replace("<", "").replace(">", "").strip())


def is_valid_root_name(name: str) -> bool:
    return bool(name) and ROOT_NAME_RE.match(name) is not None


def declared_encoding(path: Path, default: str) -> str:
    """
    Encoding named by the XML declaration of path, or default

    Only the first bytes of the file are read. An encoding Python does not
    know raises ParsingException.
    """
    try:
        with open(path, "rb") as f:
            head = f.read(DECLARATION_PEEK)
    except OSError as e:
        raise ParsingException(f"Reading sample file {path}.") from e

    match = DECLARED_ENCODING_RE.match(head)
    encoding = match.group(1).decode("ascii") if match else default
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ParsingException(f"Unknown encoding {encoding} in {path}.") from e
    return encoding
