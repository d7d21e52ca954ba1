# dbox.py
import dropbox
from dropbox.files import (
    CommitInfo,
    PathOrLink,
    ThumbnailFormat,
    ThumbnailSize,
    UploadSessionCursor,
    WriteMode,
)
from dropbox.exceptions import ApiError
import logging
from typing import BinaryIO

from .storage.dto import UploadMode

DEFAULT_UPLOAD_CHUNK_SIZE = 8 * 1024 * 1024


def is_not_found(error: Exception) -> bool:
    """Tells whether a Dropbox error means the path does not exist."""
    if not isinstance(error, ApiError) or error.error is None:
        return False
    lookup = None
    api_error = error.error
    if hasattr(api_error, "is_path") and api_error.is_path():
        lookup = api_error.get_path()
    elif hasattr(api_error, "is_path_lookup") and api_error.is_path_lookup():
        lookup = api_error.get_path_lookup()
    return lookup is not None and lookup.is_not_found()


class DropboxClient:
    """
    Thin wrapper around the Dropbox SDK. Every path is an internal path:
    absolute from the Dropbox root, "" for the root itself.
    Errors are logged and re-raised as the SDK raised them.
    """

    def __init__(
        self,
        app_key=None,
        app_secret=None,
        refresh_token=None,
        access_token=None,
        timeout=None,
        upload_chunk_size=DEFAULT_UPLOAD_CHUNK_SIZE,
    ):
        self.upload_chunk_size = upload_chunk_size
        credentials = {}
        if access_token:
            credentials["oauth2_access_token"] = access_token
        if refresh_token:
            credentials["app_key"] = app_key
            credentials["app_secret"] = app_secret
            credentials["oauth2_refresh_token"] = refresh_token
        if timeout is not None:
            credentials["timeout"] = timeout
        try:
            self.dbx = dropbox.Dropbox(**credentials)
            # Verify successful authentication by requesting current user info
            self.dbx.users_get_current_account()
            logging.info("Dropbox client initialized successfully.")
        except Exception as e:
            logging.error(
                f"Failed to initialize Dropbox client. Check your credentials. Error: {e}"
            )
            raise

    def upload(self, path: str, content: bytes, mode: UploadMode, autorename=False):
        """Uploads bytes in a single request and returns the FileMetadata of the result."""
        try:
            logging.info(f"Uploading {len(content)} bytes to {path} ({mode.value})...")
            return self.dbx.files_upload(
                content, path, mode=WriteMode(mode.value), autorename=autorename
            )
        except ApiError as e:
            logging.error(f"Failed to upload file to '{path}': {e}")
            raise

    def upload_stream(
        self, path: str, stream: BinaryIO, mode: UploadMode, autorename=False
    ):
        """
        Uploads the contents of a binary stream. A stream that fits in one chunk
        is sent with a single upload, anything larger goes through an upload session.
        """
        chunk_size = self.upload_chunk_size
        chunk = stream.read(chunk_size) or b""
        following = stream.read(chunk_size)
        if not following:
            return self.upload(path, chunk, mode, autorename=autorename)

        try:
            logging.info(f"Starting chunked upload to {path}...")
            upload_session_start_result = self.dbx.files_upload_session_start(chunk)
            cursor = UploadSessionCursor(
                session_id=upload_session_start_result.session_id,
                offset=len(chunk),
            )
            commit_info = CommitInfo(
                path=path, mode=WriteMode(mode.value), autorename=autorename
            )

            chunk = following
            while True:
                following = stream.read(chunk_size)
                if not following:
                    logging.info(f"Uploading final chunk for {path}...")
                    metadata = self.dbx.files_upload_session_finish(
                        chunk, cursor, commit_info
                    )
                    logging.info(f"Chunked upload completed for {path}.")
                    return metadata
                logging.info(f"Uploading chunk for {path} (offset: {cursor.offset})...")
                self.dbx.files_upload_session_append_v2(chunk, cursor)
                cursor.offset += len(chunk)
                chunk = following
        except ApiError as e:
            logging.error(f"Failed to upload file to '{path}' using chunked upload: {e}")
            raise

    def download(self, path: str) -> BinaryIO:
        """Opens a download and returns the undrained response body stream."""
        try:
            logging.info(f"Downloading {path}...")
            _, response = self.dbx.files_download(path)
            response.raw.decode_content = True
            return response.raw
        except ApiError as e:
            logging.error(f"Failed to download file '{path}': {e}")
            raise

    def delete(self, path: str):
        """Deletes a file or folder in Dropbox."""
        try:
            logging.info(f"Deleting {path}...")
            return self.dbx.files_delete_v2(path).metadata
        except ApiError as e:
            logging.error(f"Failed to delete path '{path}': {e}")
            raise

    def move(self, from_path: str, to_path: str):
        try:
            logging.info(f"Moving {from_path} to {to_path}...")
            return self.dbx.files_move_v2(from_path, to_path).metadata
        except ApiError as e:
            logging.error(f"Failed to move file from '{from_path}' to '{to_path}': {e}")
            raise

    def copy(self, from_path: str, to_path: str):
        try:
            logging.info(f"Copying {from_path} to {to_path}...")
            return self.dbx.files_copy_v2(from_path, to_path).metadata
        except ApiError as e:
            logging.error(f"Failed to copy file from '{from_path}' to '{to_path}': {e}")
            raise

    def create_folder(self, path: str):
        try:
            logging.info(f"Creating folder {path}...")
            return self.dbx.files_create_folder_v2(path).metadata
        except ApiError as e:
            logging.error(f"Failed to create folder '{path}': {e}")
            raise

    def get_metadata(self, path: str):
        """Returns FileMetadata or FolderMetadata for the path."""
        try:
            return self.dbx.files_get_metadata(path)
        except ApiError as e:
            if is_not_found(e):
                logging.info(f"Dropbox path '{path}' does not exist.")
            else:
                logging.error(f"Error accessing Dropbox path '{path}': {e}")
            raise

    def list_folder(self, path: str, recursive: bool = False):
        """Returns the first page of a folder listing."""
        logging.info(f"Listing Dropbox path: '{path}' (recursive: {recursive})")
        return self.dbx.files_list_folder(path, recursive=recursive)

    def list_folder_continue(self, cursor: str):
        logging.info("Found more entries, continuing listing...")
        return self.dbx.files_list_folder_continue(cursor)

    def get_temporary_link(self, path: str) -> str:
        try:
            return self.dbx.files_get_temporary_link(path).link
        except ApiError as e:
            logging.error(f"Failed to get a temporary link for '{path}': {e}")
            raise

    def get_thumbnail(self, path: str, format: str = "jpeg", size: str = "w64h64") -> bytes:
        try:
            _, response = self.dbx.files_get_thumbnail_v2(
                PathOrLink.path(path),
                format=ThumbnailFormat(format),
                size=ThumbnailSize(size),
            )
            return response.content
        except ApiError as e:
            logging.error(f"Failed to get a thumbnail for '{path}': {e}")
            raise
