"""Registry error taxonomy.

Every store and codec failure is a ``RegistryError`` subclass carrying a
machine-readable ``code`` so the CLI and the API can translate it uniformly.
"""


class RegistryError(Exception):
    """Base class for all registry errors."""

    code = "registry_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidType(RegistryError):
    """Requested animal kind is not one of the known variants."""

    code = "invalid_type"


class DuplicateFound(RegistryError):
    """An equivalent record already exists (a signal, the caller decides)."""

    code = "duplicate_found"

    def __init__(self, message: str, existing) -> None:
        super().__init__(message)
        self.existing = existing


class NotFound(RegistryError):
    """No record with the requested id."""

    code = "animal_not_found"

    def __init__(self, animal_id: int) -> None:
        super().__init__(f"Animal {animal_id} not found")
        self.animal_id = animal_id


class AlreadyKnown(RegistryError):
    """The animal already knows the command being trained."""

    code = "command_already_known"


class InvalidCommand(RegistryError):
    """Command text is blank after trimming."""

    code = "invalid_command"


class IOFailure(RegistryError):
    """The registry file could not be read or written."""

    code = "io_failure"


class CorruptData(RegistryError):
    """The registry file does not hold a valid list of records."""

    code = "corrupt_data"
