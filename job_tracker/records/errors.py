"""Exceptions raised by record stores."""


class RecordStoreError(Exception):
    """Base class for storage failures."""


class StoreReadError(RecordStoreError):
    """Records could not be read from the store."""


class StoreWriteError(RecordStoreError):
    """A record could not be written to or removed from the store."""
