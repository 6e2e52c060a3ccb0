"""
Record store exceptions.

Expected outcomes (invalid record, key conflict, unknown Id) are reported
through return values. Exceptions are kept for failures the caller cannot
act on record by record.
"""


class RecordStoreError(Exception):
    """Base class for record store errors"""


class PersistenceError(RecordStoreError):
    """Writing a collection to its backing store failed"""

    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class UnknownRecordTypeError(RecordStoreError, KeyError):
    """No model is registered under the requested resource name"""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Unknown record type: {resource}")

    def __str__(self) -> str:
        return self.args[0]
