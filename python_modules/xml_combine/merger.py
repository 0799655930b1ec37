"""Combine fragment files into a single file"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from xml_combine import config
from xml_combine.logger import get_logger
from xml_combine.parser.root_rewriter import create_new_file
from xml_combine.parser.splitter import header_fragment, split_xml
from xml_combine.parser.xml_text import (
    closing_tag, declared_encoding, is_valid_root_name, strip_declaration
)
from xml_combine.storage.archive import remove_dirs, unzip_files
from xml_combine.storage.files import get_file_list, get_new_file_name
from xml_combine.utils.exceptions import (
    DiscoveryException, FileRemoveError, InvalidRootNameError, OutputWriteError
)

logger = get_logger("merger")


@dataclass
class CombineResult:
    new_file: Path
    sources: List[Path] = field(default_factory=list)
    fragments: int = 0
    old_child: Optional[str] = None


def remove_file(path: Path, what: str):
    try:
        Path(path).unlink()
    except OSError as e:
        raise FileRemoveError(f"Removing {what} {path}.") from e
    logger.info(f"Removing {what} {path}.")


def append_fragment(fragment: Path, new_file: Path, encoding: str = None):
    """
    Append a record fragment to new_file without its XML declaration

    The fragment is read in the encoding it declares and written in encoding.
    """
    if encoding is None:
        encoding = config.ENCODING
    try:
        with open(fragment, "r", encoding=declared_encoding(fragment, config.ENCODING)) as src, \
                open(new_file, "a", encoding=encoding, errors="xmlcharrefreplace") as out:
            for line in src:
                stripped = strip_declaration(line)
                if stripped != line and not stripped.strip():
                    continue
                out.write(stripped)
    except (OSError, UnicodeDecodeError) as e:
        raise OutputWriteError(f"Adding fragment {fragment}.") from e
    logger.info(f"Adding fragment {fragment}.")


def append_source(source_file: Path, new_file: Path):
    """Append a source file to new_file byte for byte"""
    try:
        with open(source_file, "rb") as src, open(new_file, "ab") as out:
            shutil.copyfileobj(src, out)
    except OSError as e:
        raise OutputWriteError(f"Adding source file {source_file}.") from e
    logger.info(f"Adding source file {source_file}.")


def append_closing_tag(new_file: Path, new_root: str, encoding: str = None):
    logger.info(f"Applying closing tag, {new_root} for root of {new_file}.")
    try:
        with open(new_file, "a", encoding=encoding or config.ENCODING) as out:
            out.write(f"{closing_tag(new_root)}\n")
    except OSError as e:
        raise OutputWriteError(f"Applying closing tag to {new_file}.") from e


def combine(file_mask: str, work_dir: Path = None, new_root: str = None, splitter: str = None) -> CombineResult:
    """
    Combine every file matching file_mask into a single file

    Zip archives matching the mask are extracted first. With new_root, each
    source is split into records that are wrapped in a new <new_root>
    element; without it the sources are concatenated as they are (CSV
    without header, or XML without root). Consumed sources, fragments and
    extracted directories are deleted. The first failure raises a
    CombineException and leaves everything done so far in place.

    Args:
        file_mask: File mask of files to be combined. Ex: "CFNC XML*"
        work_dir: Working directory (defaults to the current one)
        new_root: New root element name (XML only)
        splitter: Splitter back-end (defaults to config)

    Returns:
        CombineResult describing the combined file
    """
    base_dir = Path(work_dir) if work_dir else Path.cwd()
    if not base_dir.is_dir():
        raise DiscoveryException(f"Working directory {base_dir} not found.")
    if new_root and not is_valid_root_name(new_root):
        raise InvalidRootNameError(f"Invalid new root name {new_root!r}.")

    dirs_to_clean = unzip_files(base_dir, file_mask)
    new_file = get_new_file_name(base_dir, file_mask)
    source_files = get_file_list(base_dir, file_mask)
    result = CombineResult(new_file=new_file)

    encoding = None
    if new_root:
        encoding = declared_encoding(source_files[0], config.ENCODING)
        result.old_child = create_new_file(new_file, new_root, source_files[0], encoding)
        logger.info(f"Original child line: {result.old_child}")

    for source_file in source_files:
        if new_root:
            for xml_fragment in split_xml(source_file, file_mask, base_dir, splitter):
                append_fragment(xml_fragment, new_file, encoding)
                remove_file(xml_fragment, "XML fragment")
                result.fragments += 1
            remove_file(header_fragment(source_file), "XML header")
        else:
            append_source(source_file, new_file)
        remove_file(source_file, "source file")
        result.sources.append(source_file)

    remove_dirs(dirs_to_clean)

    if new_root:
        append_closing_tag(new_file, new_root, encoding)

    logger.info(f"Reassembly completed in {new_file}")
    return result
