"""Source file discovery and output naming"""

import fnmatch
import re
from datetime import datetime
from pathlib import Path
from typing import List

from xml_combine import config
from xml_combine.logger import get_logger
from xml_combine.utils.exceptions import NoSourceFilesError

logger = get_logger("storage.files")


def matches_mask(name: str, file_mask: str) -> bool:
    """Case-insensitive glob match on a bare file name"""
    return fnmatch.fnmatchcase(name.lower(), file_mask.lower())


def is_excluded(name: str) -> bool:
    """True for combined outputs and reserved extensions, never used as sources"""
    name = name.lower()
    if config.COMBINED_MARKER in name:
        return True
    return name.endswith(tuple(ext.lower() for ext in config.RESERVED_EXTENSIONS))


def walk_files(base_dir: Path, file_mask: str) -> List[Path]:
    """All regular files below base_dir matching file_mask, sorted by relative path"""
    base_dir = Path(base_dir)
    found = [
        path for path in base_dir.rglob("*")
        if path.is_file() and matches_mask(path.name, file_mask)
    ]
    return sorted(found, key=lambda path: path.relative_to(base_dir).as_posix())


def find_files(base_dir: Path, file_mask: str) -> List[Path]:
    """
    List source files to be combined

    Args:
        base_dir: Working directory, searched recursively
        file_mask: Glob mask. Ex: "CFNC XML*"

    Returns:
        Matching files, excluding previous combined outputs
    """
    return [path for path in walk_files(base_dir, file_mask) if not is_excluded(path.name)]


def get_file_list(base_dir: Path, file_mask: str) -> List[Path]:
    """Same as find_files, but fails when nothing matches"""
    files = find_files(base_dir, file_mask)
    if not files:
        raise NoSourceFilesError(f"No files matching {file_mask} in {base_dir}.")
    logger.info(f"Found {len(files)} files matching {file_mask}.")
    return files


def get_new_file_name(base_dir: Path, file_mask: str, now: datetime = None) -> Path:
    """
    Build the combined output file name

    The name is the mask text before its first wildcard, "-combined_", a
    timestamp and the extension of the first matching source.
    """
    files = find_files(base_dir, file_mask)
    if not files:
        raise NoSourceFilesError(f"No files matching {file_mask} in {base_dir}.")

    if now is None:
        now = datetime.now()
    prefix = re.split(r"[*?\[]", file_mask, maxsplit=1)[0]
    name = f"{prefix}-{config.COMBINED_MARKER}_{now.strftime(config.TIMESTAMP_FORMAT)}"
    suffix = files[0].suffix

    # Two runs within the same second must not append to the same file
    new_file = Path(base_dir) / f"{name}{suffix}"
    counter = 1
    while new_file.exists():
        new_file = Path(base_dir) / f"{name}_{counter}{suffix}"
        counter += 1
    return new_file
