# adapter.py
import hashlib
import logging
from calendar import timegm
from typing import BinaryIO, Iterator, Optional

from dropbox.exceptions import DropboxException
from dropbox.files import FileMetadata as DropboxFileMetadata
from dropbox.files import FolderMetadata as DropboxFolderMetadata

from .dbox import DropboxClient, is_not_found
from .exceptions import (
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToMoveFile,
    UnableToProvideChecksum,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from .mime import ExtensionMimeTypeDetector, MimeTypeDetector
from .path_prefixer import PathPrefixer, normalize_path
from .storage.base import FilesystemAdapter
from .storage.dto import (
    DirectoryAttributes,
    FileAttributes,
    StorageEntry,
    UploadMode,
    Visibility,
)


class DropboxAdapter(FilesystemAdapter):
    """
    Filesystem adapter backed by Dropbox, implementing the FilesystemAdapter interface.

    Callers use external paths relative to the configured prefix; every path
    sent to Dropbox is prefixed and normalized, and every path handed back
    has the prefix stripped again.
    """

    def __init__(
        self,
        client: DropboxClient,
        prefix: str = "",
        mime_type_detector: Optional[MimeTypeDetector] = None,
    ):
        self.client = client
        self.prefixer = PathPrefixer(prefix)
        self.mime_type_detector = mime_type_detector or ExtensionMimeTypeDetector()

    def get_client(self) -> DropboxClient:
        return self.client

    def apply_path_prefix(self, path: str) -> str:
        return self.prefixer.prefix_path(path)

    def file_exists(self, path: str) -> bool:
        return isinstance(self._stat_or_none(path), DropboxFileMetadata)

    def directory_exists(self, path: str) -> bool:
        return isinstance(self._stat_or_none(path), DropboxFolderMetadata)

    def _stat_or_none(self, path: str):
        location = self.apply_path_prefix(path)
        try:
            return self.client.get_metadata(location)
        except DropboxException as e:
            if not is_not_found(e):
                logging.warning(
                    f"Existence check for '{location}' failed, reporting it as missing: {e}"
                )
            return None

    def write(
        self, path: str, contents: bytes, mode: UploadMode = UploadMode.OVERWRITE
    ) -> FileAttributes:
        location = self.apply_path_prefix(path)
        try:
            response = self.client.upload(location, contents, mode)
        except DropboxException as e:
            raise UnableToWriteFile(path, str(e)) from e
        return self.normalize_response(response)

    def write_stream(
        self, path: str, stream: BinaryIO, mode: UploadMode = UploadMode.OVERWRITE
    ) -> FileAttributes:
        location = self.apply_path_prefix(path)
        try:
            response = self.client.upload_stream(location, stream, mode)
        except (DropboxException, OSError) as e:
            raise UnableToWriteFile(path, str(e)) from e
        return self.normalize_response(response)

    def read(self, path: str) -> bytes:
        stream = self.read_stream(path)
        try:
            return stream.read()
        except Exception as e:
            raise UnableToReadFile(path, f"Could not drain the download stream: {e}") from e
        finally:
            stream.close()

    def read_stream(self, path: str) -> BinaryIO:
        location = self.apply_path_prefix(path)
        try:
            return self.client.download(location)
        except DropboxException as e:
            raise UnableToReadFile(path, str(e)) from e

    def delete(self, path: str) -> None:
        location = self.apply_path_prefix(path)
        try:
            self.client.delete(location)
        except DropboxException as e:
            raise UnableToDeleteFile(path, str(e)) from e

    def delete_directory(self, path: str) -> None:
        try:
            self.delete(path)
        except UnableToDeleteFile as e:
            raise UnableToDeleteDirectory(path, e.reason) from e.__cause__

    def create_directory(self, path: str) -> DirectoryAttributes:
        location = self.apply_path_prefix(path)
        try:
            response = self.client.create_folder(location)
        except DropboxException as e:
            raise UnableToCreateDirectory(path, str(e)) from e
        return self.normalize_response(response)

    def set_visibility(self, path: str, visibility: Visibility) -> None:
        raise UnableToSetVisibility(path, "Adapter does not support visibility controls.")

    def visibility(self, path: str) -> FileAttributes:
        # Dropbox has no per-file visibility; report a neutral record.
        return FileAttributes(path=normalize_path(path))

    def mime_type(self, path: str) -> FileAttributes:
        path = normalize_path(path)
        return FileAttributes(
            path=path,
            mime_type=self.mime_type_detector.detect_mime_type_from_path(path),
        )

    def last_modified(self, path: str) -> FileAttributes:
        return self._file_metadata(path, "last_modified")

    def file_size(self, path: str) -> FileAttributes:
        return self._file_metadata(path, "file_size")

    def get_metadata(self, path: str) -> StorageEntry:
        location = self.apply_path_prefix(path)
        try:
            response = self.client.get_metadata(location)
        except DropboxException as e:
            raise UnableToRetrieveMetadata(path, "metadata", str(e)) from e
        return self.normalize_response(response)

    def _file_metadata(self, path: str, metadata_type: str) -> FileAttributes:
        location = self.apply_path_prefix(path)
        try:
            response = self.client.get_metadata(location)
        except DropboxException as e:
            raise UnableToRetrieveMetadata(path, metadata_type, str(e)) from e
        attributes = self.normalize_response(response)
        if not isinstance(attributes, FileAttributes):
            raise UnableToRetrieveMetadata(path, metadata_type, "Path is not a file.")
        return attributes

    def checksum(self, path: str, algorithm: Optional[str] = None) -> str:
        """
        Dropbox only exposes its own content hash. It is returned as-is for
        "sha256"; any other algorithm hashes that content hash string.
        """
        algorithm = (algorithm or "sha256").lower()
        location = self.apply_path_prefix(path)
        try:
            response = self.client.get_metadata(location)
        except DropboxException as e:
            raise UnableToProvideChecksum(path, str(e)) from e

        content_hash = getattr(response, "content_hash", None)
        if not content_hash:
            raise UnableToProvideChecksum(path, "Dropbox did not provide a content hash.")
        if algorithm == "sha256":
            return content_hash
        try:
            return hashlib.new(algorithm, content_hash.encode()).hexdigest()
        except (ValueError, TypeError) as e:
            # TypeError: variable-length digests (shake_*) need an explicit length.
            raise UnableToProvideChecksum(path, f"Unsupported algorithm '{algorithm}'.") from e

    def list_contents(self, path: str = "", deep: bool = False) -> Iterator[StorageEntry]:
        """
        Lazily yields the entries of a directory, following the listing cursor
        page by page. The listed directory itself is never yielded.

        Listing is best-effort: a failed remote call is logged and ends the
        listing instead of raising.
        """
        # Dropbox paths are case-insensitive, path_display keeps the stored case.
        root = normalize_path(path).casefold()
        location = self.apply_path_prefix(path)
        try:
            result = self.client.list_folder(location, recursive=deep)
        except DropboxException as e:
            logging.error(f"Failed to list contents of Dropbox path '{location}': {e}")
            return

        while True:
            for entry in result.entries:
                attributes = self.normalize_response(entry)
                if isinstance(attributes, DirectoryAttributes) and attributes.path.casefold() == root:
                    continue
                yield attributes
            if not result.has_more:
                return
            try:
                result = self.client.list_folder_continue(result.cursor)
            except DropboxException as e:
                logging.error(
                    f"Failed to continue listing Dropbox path '{location}', results are incomplete: {e}"
                )
                return

    def move(self, source: str, destination: str) -> None:
        from_path = self.apply_path_prefix(source)
        to_path = self.apply_path_prefix(destination)
        try:
            self.client.move(from_path, to_path)
        except DropboxException as e:
            raise UnableToMoveFile(source, destination, str(e)) from e

    def copy(self, source: str, destination: str) -> None:
        from_path = self.apply_path_prefix(source)
        to_path = self.apply_path_prefix(destination)
        try:
            self.client.copy(from_path, to_path)
        except DropboxException as e:
            raise UnableToCopyFile(source, destination, str(e)) from e

    def get_temporary_url(self, path: str) -> str:
        return self.client.get_temporary_link(self.apply_path_prefix(path))

    def get_thumbnail(self, path: str, format: str = "jpeg", size: str = "w64h64") -> bytes:
        return self.client.get_thumbnail(self.apply_path_prefix(path), format, size)

    def normalize_response(self, response) -> StorageEntry:
        """Converts Dropbox file/folder metadata to our standardized attributes."""
        server_modified = getattr(response, "server_modified", None)
        # The SDK returns naive datetimes in UTC.
        timestamp = timegm(server_modified.utctimetuple()) if server_modified else None

        if isinstance(response, DropboxFolderMetadata):
            return DirectoryAttributes(
                path=self.prefixer.strip_directory_prefix(response.path_display),
                last_modified=timestamp,
            )

        path = self.prefixer.strip_prefix(response.path_display)
        return FileAttributes(
            path=path,
            file_size=getattr(response, "size", None),
            last_modified=timestamp,
            checksum=getattr(response, "content_hash", None),
            mime_type=self.mime_type_detector.detect_mime_type_from_path(path),
        )
