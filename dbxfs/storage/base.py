# storage/base.py
from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Optional
from .dto import (
    DirectoryAttributes,
    FileAttributes,
    StorageEntry,
    UploadMode,
    Visibility,
)


class FilesystemAdapter(ABC):
    """
    Abstract base class for a filesystem backed by some storage provider.
    All paths are external: relative to the adapter root, without a prefix.
    Failures are reported with the exceptions from `dbxfs.exceptions`.
    """

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def write(
        self, path: str, contents: bytes, mode: UploadMode = UploadMode.OVERWRITE
    ) -> FileAttributes:
        """
        Writes a file.

        :param path: The external path of the file.
        :param contents: The file contents.
        :param mode: Whether an existing file may be overwritten.
        :return: The attributes of the written file.
        """
        pass

    @abstractmethod
    def write_stream(
        self, path: str, stream: BinaryIO, mode: UploadMode = UploadMode.OVERWRITE
    ) -> FileAttributes:
        """
        Writes a file, reading its contents from a binary stream.
        The stream is not closed.
        """
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        pass

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """
        Opens a file for reading. The caller owns the returned stream
        and must close it.
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        pass

    @abstractmethod
    def delete_directory(self, path: str) -> None:
        pass

    @abstractmethod
    def create_directory(self, path: str) -> DirectoryAttributes:
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: Visibility) -> None:
        pass

    @abstractmethod
    def visibility(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def mime_type(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def last_modified(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def file_size(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def checksum(self, path: str, algorithm: Optional[str] = None) -> str:
        pass

    @abstractmethod
    def list_contents(self, path: str = "", deep: bool = False) -> Iterator[StorageEntry]:
        """
        Lists the entries of a directory.

        :param path: The external path of the directory.
        :param deep: Whether to descend into subdirectories.
        :return: A lazy iterator of file and directory attributes.
        """
        pass

    @abstractmethod
    def move(self, source: str, destination: str) -> None:
        pass

    @abstractmethod
    def copy(self, source: str, destination: str) -> None:
        pass
