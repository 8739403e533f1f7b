"""Custom Exceptions for the PodSync application."""

class PodSyncError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(PodSyncError):
    """Exception raised for errors in configuration loading."""
    pass

class FeedError(PodSyncError):
    """Exception raised when the RSS feed cannot be fetched or parsed."""
    pass

class StoreError(PodSyncError):
    """Exception raised when a JSON store cannot be read or written."""
    pass

class EpisodeNotFoundError(StoreError):
    """Exception raised when an episode id is not in the episodes file."""
    pass

class TranscriptNotFoundError(StoreError):
    """Exception raised when a transcript track has not been generated yet."""
    pass

class AudioDownloadError(PodSyncError):
    """Exception raised for errors while downloading episode audio."""
    pass

class AudioExtractionError(PodSyncError):
    """Exception raised for errors during audio conversion."""
    pass

class TranscriptionError(PodSyncError):
    """Exception raised for errors during transcription."""
    pass

class TranslationError(PodSyncError):
    """Exception raised for errors during translation."""
    pass

class FileSystemError(PodSyncError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass
