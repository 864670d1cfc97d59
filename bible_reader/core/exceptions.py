class BibleReaderError(Exception):
    """Base error for the reader."""


class ValidationError(BibleReaderError):
    """An uploaded document (version, outline, settings) is not valid."""


class StorageError(BibleReaderError):
    """Reading from or writing to the local store failed."""
