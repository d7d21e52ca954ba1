# storage/dto.py
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel


class UploadMode(str, Enum):
    """Write semantics requested from the remote on upload."""

    ADD = "add"  # fail (or autorename) if the destination exists
    OVERWRITE = "overwrite"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class StorageAttributes(BaseModel):
    """
    Provider-independent metadata for an entry of the storage.
    The path is always the external one, relative to the adapter root.
    """

    path: str
    last_modified: Optional[int] = None
    visibility: Optional[Visibility] = None

    def is_file(self) -> bool:
        return self.type == "file"

    def is_dir(self) -> bool:
        return self.type == "dir"


class FileAttributes(StorageAttributes):
    type: Literal["file"] = "file"
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    checksum: Optional[str] = None


class DirectoryAttributes(StorageAttributes):
    type: Literal["dir"] = "dir"


StorageEntry = Union[FileAttributes, DirectoryAttributes]
