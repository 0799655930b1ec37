"""Custom exceptions for XML Combine"""


class CombineException(Exception):
    """Base exception for all combine errors"""
    pass


class ArchiveException(CombineException):
    """Exception related to zip archive staging"""
    pass


class ArchiveExtractError(ArchiveException):
    """Failed to extract a zip archive"""
    pass


class ArchiveRemoveError(ArchiveException):
    """Failed to delete an extracted zip archive"""
    pass


class DiscoveryException(CombineException):
    """Exception during source file discovery"""
    pass


class NoSourceFilesError(DiscoveryException):
    """No file matches the file mask"""
    pass


class ParsingException(CombineException):
    """Exception during XML text inspection"""
    pass


class RootTagNotFoundError(ParsingException):
    """Root tag could not be detected in the sample fragment"""
    pass


class InvalidRootNameError(ParsingException):
    """New root name is not a usable XML element name"""
    pass


class SplitError(CombineException):
    """Failed to split an XML file into record fragments"""
    pass


class StorageException(CombineException):
    """Exception during file writes or deletions"""
    pass


class OutputWriteError(StorageException):
    """Failed to write to the combined file"""
    pass


class FileRemoveError(StorageException):
    """Failed to delete a consumed file"""
    pass


class DirectoryRemoveError(StorageException):
    """Failed to delete a staged archive directory"""
    pass
