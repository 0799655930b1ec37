"""Zip archive staging and cleanup"""

import zipfile
from pathlib import Path
from typing import Iterable, List

from xml_combine import config
from xml_combine.logger import get_logger
from xml_combine.storage.files import walk_files
from xml_combine.utils.exceptions import (
    ArchiveExtractError, ArchiveRemoveError, DirectoryRemoveError
)

logger = get_logger("storage.archive")


def unzip_files(base_dir: Path, file_mask: str) -> List[Path]:
    """
    Unzip archives matching "<file_mask>.zip" to directories of the same name

    Each archive is deleted once extracted.

    Args:
        base_dir: Working directory, searched recursively
        file_mask: File mask of the fragments. Ex: "CFNC XML*"

    Returns:
        Directories created, to be removed after the merge
    """
    zip_dirs = []

    for zip_file in walk_files(base_dir, f"{file_mask}{config.ARCHIVE_EXTENSION}"):
        zip_dir = zip_file.with_name(zip_file.name[:-len(config.ARCHIVE_EXTENSION)])

        try:
            with zipfile.ZipFile(zip_file) as archive:
                archive.extractall(zip_dir)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveExtractError(f"Extracting zip file {zip_file}.") from e
        logger.info(f"Extracting zip file {zip_file}.")
        zip_dirs.append(zip_dir)

        try:
            zip_file.unlink()
        except OSError as e:
            raise ArchiveRemoveError(f"Removing zip file {zip_file}.") from e
        logger.info(f"Removing zip file {zip_file}.")

    return zip_dirs


def remove_dirs(dirs: Iterable[Path]):
    """Remove staged archive directories, which must be empty by now"""
    for empty_dir in dirs:
        try:
            Path(empty_dir).rmdir()
        except OSError as e:
            raise DirectoryRemoveError(f"Removing directory {empty_dir}.") from e
        logger.info(f"Removing directory {empty_dir}.")
