"""Typed failures raised by the document store and the directories."""


class HRDeskError(Exception):
    """Base exception for data layer failures."""


class StorageError(HRDeskError, OSError):
    """Raised when the data file or its directory cannot be read or written."""


class CorruptDataError(HRDeskError):
    """Raised when the persisted document is not valid JSON of the expected shape."""


class NotFoundError(HRDeskError):
    """Raised when no record matches the requested key."""


class DuplicateError(HRDeskError):
    """Raised when a create would violate a uniqueness rule."""


class DuplicateUserError(DuplicateError):
    pass


class DuplicateEmployeeError(DuplicateError):
    pass


class InvalidCredentialsError(HRDeskError):
    """Raised on any login mismatch; never says which part failed."""
