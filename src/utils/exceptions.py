"""Custom exception classes."""


class ValidationError(Exception):
    """Raised when data fails validation."""
    pass


class MissingParameterError(ValidationError):
    """Raised when a required argument is omitted or None."""

    def __init__(self, message: str = "missing parameter"):
        super().__init__(message)


class MissingBirthError(ValidationError):
    """Raised when a person has no birth date."""

    def __init__(self, message: str = "missing birth"):
        super().__init__(message)


class InvalidBirthTypeError(ValidationError):
    """Raised when birth is present but not a date."""

    def __init__(self, message: str = "birth must be a valid date"):
        super().__init__(message)


class FutureBirthDateError(ValidationError):
    """Raised when birth date lies after the reference date."""

    def __init__(self, message: str = "birth date is in the future"):
        super().__init__(message)


class FileWriteError(Exception):
    """Raised when unable to write to JSON file."""
    pass


class RegistrantStoreError(Exception):
    """Raised when the registrant store cannot list or create records."""
    pass
