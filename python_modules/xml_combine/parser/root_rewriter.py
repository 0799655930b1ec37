"""Create the combined file header with a new root element"""

from itertools import chain
from pathlib import Path

from xml_combine import config
from xml_combine.logger import get_logger
from xml_combine.parser.xml_text import (
    content_lines, declared_encoding, detect_root_tag, isolate_root_tag, rename_root,
    split_declaration
)
from xml_combine.utils.exceptions import (
    OutputWriteError, ParsingException, RootTagNotFoundError
)

logger = get_logger("parser.root_rewriter")


def read_header(sample_file: Path, encoding: str = None):
    """
    Read the head of a sample fragment

    Returns:
        (declaration or None, original root name or None, header lines), the
        header lines being the root line and the line after it
    """
    if encoding is None:
        encoding = declared_encoding(sample_file, config.ENCODING)
    with open(sample_file, "r", encoding=encoding) as f:
        declaration, rest = split_declaration(f.readline())
        root = None
        lines = []
        for line in chain(content_lines([rest]), content_lines(f)):
            if root is None:
                root = detect_root_tag([line])
                if root is None:
                    continue
            lines.append(line)
            if len(lines) == 2:
                break
    return declaration, root, lines


def create_new_file(new_file: Path, new_root: str, sample_file: Path, encoding: str = None) -> str:
    """
    Create the combined file with a new root, so fragments can be appended to it

    Args:
        new_file: Combined file to create
        new_root: New root element name. Ex: HighSchoolTranscripts
        sample_file: Source fragment whose root is replaced
        encoding: Encoding of the sample and of new_file (defaults to the
            one declared by the sample)

    Returns:
        Content following the original root tag (the child wrapping line)
    """
    if encoding is None:
        encoding = declared_encoding(sample_file, config.ENCODING)
    try:
        declaration, old_root, lines = read_header(sample_file, encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ParsingException(f"Reading sample file {sample_file}.") from e
    if old_root is None:
        raise RootTagNotFoundError(f"No root tag found in {sample_file}.")

    header = [rename_root(line, old_root, new_root) for line in lines]

    isolated = isolate_root_tag(header[0], new_root)
    if isolated is None:
        raise RootTagNotFoundError(
            f"Root tag <{old_root}> in {sample_file} is not a complete opening tag on one line."
        )
    root_tag, rest = isolated
    old_child = rest.strip() or (header[1].strip() if len(header) > 1 else "")

    try:
        with open(new_file, "w", encoding=encoding, errors="xmlcharrefreplace") as f:
            if declaration:
                f.write(f"{declaration}\n")
            f.write(f"{root_tag}\n")
    except OSError as e:
        raise OutputWriteError("Setting output header.") from e

    logger.info(f"Setting output header: <{old_root}> replaced with <{new_root}> in {new_file}.")
    return old_child
