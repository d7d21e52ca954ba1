# exceptions.py


class FilesystemError(Exception):
    """Base class for every failure raised by a filesystem adapter."""

    operation = "Filesystem operation failed"

    def __init__(self, location: str, reason: str = ""):
        self.location = location
        self.reason = reason
        super().__init__(self._message())

    def _message(self) -> str:
        message = f"{self.operation} at location: {self.location}."
        if self.reason:
            message += f" {self.reason}"
        return message


class UnableToWriteFile(FilesystemError):
    operation = "Unable to write file"


class UnableToReadFile(FilesystemError):
    operation = "Unable to read file"


class UnableToDeleteFile(FilesystemError):
    operation = "Unable to delete file"


class UnableToDeleteDirectory(FilesystemError):
    operation = "Unable to delete directory"


class UnableToCreateDirectory(FilesystemError):
    operation = "Unable to create directory"


class UnableToProvideChecksum(FilesystemError):
    operation = "Unable to get checksum"


class UnableToSetVisibility(FilesystemError):
    """Raised unconditionally by adapters without visibility controls."""

    operation = "Unable to set visibility"


class UnableToRetrieveMetadata(FilesystemError):
    """Raised when a stat-style lookup (size, timestamp, ...) fails."""

    operation = "Unable to retrieve metadata"

    def __init__(self, location: str, metadata_type: str = "", reason: str = ""):
        self.metadata_type = metadata_type
        super().__init__(location, reason)

    def _message(self) -> str:
        message = f"{self.operation} of type {self.metadata_type or 'metadata'} for file at location: {self.location}."
        if self.reason:
            message += f" {self.reason}"
        return message


class _RelocationError(FilesystemError):
    def __init__(self, source: str, destination: str, reason: str = ""):
        self.source = source
        self.destination = destination
        super().__init__(source, reason)

    def _message(self) -> str:
        message = f"{self.operation} from {self.source} to {self.destination}."
        if self.reason:
            message += f" {self.reason}"
        return message


class UnableToMoveFile(_RelocationError):
    operation = "Unable to move file"


class UnableToCopyFile(_RelocationError):
    operation = "Unable to copy file"
