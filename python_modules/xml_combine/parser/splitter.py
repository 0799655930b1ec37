"""Split XML files into one file per top-level record"""

import re
import shutil
import subprocess
from pathlib import Path
from typing import List

from lxml import etree

from xml_combine import config
from xml_combine.logger import get_logger
from xml_combine.parser.xml_text import declared_encoding
from xml_combine.storage.files import walk_files
from xml_combine.utils.exceptions import SplitError

logger = get_logger("parser.splitter")


def fragment_name(source_file: Path, number) -> Path:
    """Split fragment path: <stem>-NN<ext> beside the source"""
    source_file = Path(source_file)
    if isinstance(number, int):
        number = f"{number:0{config.FRAGMENT_DIGITS}d}"
    return source_file.with_name(f"{source_file.stem}-{number}{source_file.suffix}")


def header_fragment(source_file: Path) -> Path:
    """The structural header fragment written by the splitter, never appended"""
    return fragment_name(source_file, config.HEADER_SUFFIX)


def fragment_pattern(source_file: Path) -> re.Pattern:
    """Record fragments of one source: <stem>-N with any number of digits, not all zeros"""
    source_file = Path(source_file)
    return re.compile(
        rf"^{re.escape(source_file.stem)}-(?!0+{re.escape(source_file.suffix)}$)"
        rf"(\d+){re.escape(source_file.suffix)}$"
    )


def resolve_splitter(splitter: str = None) -> str:
    if splitter is None:
        splitter = config.SPLITTER
    if splitter not in config.SPLITTERS:
        raise SplitError(f"Unknown splitter {splitter}.")
    if splitter == "auto":
        return "xml_split" if shutil.which(config.XML_SPLIT_COMMAND) else "lxml"
    return splitter


def run_xml_split(source_file: Path):
    """Run the external XML::Twig xml_split utility on source_file"""
    source_file = Path(source_file)
    try:
        subprocess.run(
            [config.XML_SPLIT_COMMAND, source_file.name],
            cwd=str(source_file.parent),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise SplitError(f"Splitting XML file, {source_file}.") from e


def _write_fragment(path: Path, text: str, encoding: str):
    with open(path, "w", encoding=encoding, errors="xmlcharrefreplace") as f:
        f.write(f'<?xml version="1.0" encoding="{encoding.upper()}"?>\n')
        f.write(text)
        f.write("\n")


def lxml_split(source_file: Path) -> List[Path]:
    """
    Split source_file in-process, writing the same layout as xml_split

    Every child of the root goes to its own <stem>-NN file; <stem>-00 keeps
    the root element with an xi:include per record. Fragments are written in
    the encoding declared by the source.

    Returns:
        Record fragments in split order
    """
    source_file = Path(source_file)
    encoding = declared_encoding(source_file, config.ENCODING)
    root = None
    parts = []
    depth = 0

    try:
        for event, elem in etree.iterparse(str(source_file), events=("start", "end")):
            if event == "start":
                if root is None:
                    root = elem
                depth += 1
                continue

            depth -= 1
            if depth != 1:
                continue

            part = fragment_name(source_file, len(parts) + 1)
            _write_fragment(part, etree.tostring(elem, encoding="unicode", with_tail=False), encoding)
            parts.append(part)

            # Free records already written
            elem.clear()
            while elem.getprevious() is not None:
                del root[0]
    except (etree.XMLSyntaxError, OSError) as e:
        raise SplitError(f"Splitting XML file, {source_file}.") from e

    nsmap = dict(root.nsmap)
    nsmap.setdefault("xi", config.XINCLUDE_NS)
    header = etree.Element(root.tag, attrib=dict(root.attrib), nsmap=nsmap)
    for part in parts:
        etree.SubElement(header, f"{{{config.XINCLUDE_NS}}}include", href=part.name)

    try:
        _write_fragment(
            header_fragment(source_file),
            etree.tostring(header, encoding="unicode", pretty_print=True).rstrip(),
            encoding
        )
    except OSError as e:
        raise SplitError(f"Splitting XML file, {source_file}.") from e

    return parts


def split_xml(source_file: Path, file_mask: str, base_dir: Path = None, splitter: str = None) -> List[Path]:
    """
    Split an XML file into a list of new files, one level deeper

    Args:
        source_file: File to break up
        file_mask: File mask of the sources (also used for searching)
        base_dir: Directory searched for the fragments (defaults to the source's)
        splitter: "auto", "xml_split" or "lxml" (defaults to config)

    Returns:
        Record fragments in split order, excluding the header fragment
    """
    source_file = Path(source_file)
    if base_dir is None:
        base_dir = source_file.parent

    if resolve_splitter(splitter) == "lxml":
        fragments = lxml_split(source_file)
        logger.info(f"Splitting XML file, {source_file}.")
        return fragments

    run_xml_split(source_file)
    logger.info(f"Splitting XML file, {source_file}.")

    # Keep only this source's fragments, other numbered files may share the mask
    pattern = fragment_pattern(source_file)
    fragments = []
    for path in walk_files(base_dir, f"{file_mask}*"):
        match = pattern.match(path.name)
        if match and path.parent == source_file.parent:
            fragments.append((int(match.group(1)), path))

    return [path for _, path in sorted(fragments)]
