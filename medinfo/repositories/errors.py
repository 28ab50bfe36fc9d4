"""Exceptions raised by record store backends."""


class RecordStoreError(Exception):
    """Base class for record store failures."""


class StorageError(RecordStoreError):
    """Raised when the backing storage cannot be read or written."""


class EntryNotFoundError(RecordStoreError):
    """Raised when mutating a disease entry that does not exist."""

    def __init__(self, entry_id):
        super().__init__(f"Disease {entry_id} not found")
        self.entry_id = entry_id


class AdministratorExistsError(RecordStoreError):
    pass


class AdministratorNotFoundError(RecordStoreError):
    pass
