# main.py
import argparse
import logging
import sys
from typing import Optional

from .adapter import DropboxAdapter
from .config import get_settings
from .dbox import DropboxClient
from .exceptions import FilesystemError
from dropbox.exceptions import DropboxException


def setup_logging():
    """Configures logging to file and console explicitly."""
    settings = get_settings()
    log_level_name = settings.LOG_LEVEL.upper()

    # Get the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_name)

    # Clear any existing handlers to prevent duplicate logs on re-runs or implicit configs
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    try:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except IOError as e:
        # Log to console if file logging fails (e.g., permissions)
        root_logger.error(f"Failed to set up file logging to {settings.LOG_FILE}: {e}")

    # Reducing "noise" from third-party libraries
    logging.getLogger("dropbox").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_dropbox_client(settings) -> Optional[DropboxClient]:
    """
    Initializes the Dropbox client, trying an access token first, then the
    refresh token from the environment and finally the one from the token file.
    """
    common = dict(
        timeout=settings.DROPBOX_TIMEOUT,
        upload_chunk_size=settings.DROPBOX_UPLOAD_CHUNK_SIZE,
    )
    attempts = [
        ("access token", dict(access_token=settings.DROPBOX_ACCESS_TOKEN)),
        ("refresh token from environment variable", dict(refresh_token=settings.DROPBOX_REFRESH_TOKEN_ENV)),
        ("refresh token from token file", dict(refresh_token=settings.DROPBOX_REFRESH_TOKEN_FILE)),
    ]
    for source, credentials in attempts:
        if not any(credentials.values()):
            continue
        try:
            logging.info(f"Attempting to connect to Dropbox using {source}...")
            return DropboxClient(
                app_key=settings.DROPBOX_APP_KEY,
                app_secret=settings.DROPBOX_APP_SECRET,
                **credentials,
                **common,
            )
        except Exception:
            logging.warning(
                f"Failed to connect using {source}. It might be invalid or expired."
            )
    logging.critical("Could not establish a connection to Dropbox with any configured credential.")
    return None


def build_adapter(settings=None) -> Optional[DropboxAdapter]:
    settings = settings or get_settings()
    client = build_dropbox_client(settings)
    if client is None:
        return None
    return DropboxAdapter(client, prefix=settings.DROPBOX_ROOT_PREFIX)


def _print_entry(entry):
    if entry.is_dir():
        print(f"{'dir':<6}{'':>12}  {entry.path}/")
    else:
        size = "" if entry.file_size is None else entry.file_size
        print(f"{'file':<6}{size:>12}  {entry.path}")


def run_command(adapter: DropboxAdapter, args) -> int:
    if args.command == "ls":
        for entry in adapter.list_contents(args.path, deep=args.recursive):
            _print_entry(entry)
    elif args.command == "stat":
        print(adapter.get_metadata(args.path).model_dump_json(indent=2))
    elif args.command == "link":
        print(adapter.get_temporary_url(args.path))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect a Dropbox folder through the dbxfs adapter."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ls_parser = subparsers.add_parser("ls", help="List a directory.")
    ls_parser.add_argument("path", nargs="?", default="")
    ls_parser.add_argument(
        "-r", "--recursive", action="store_true", help="Descend into subdirectories."
    )
    stat_parser = subparsers.add_parser("stat", help="Show the metadata of a path.")
    stat_parser.add_argument("path")
    link_parser = subparsers.add_parser("link", help="Print a temporary download link.")
    link_parser.add_argument("path")

    args = parser.parse_args(argv)

    setup_logging()

    adapter = build_adapter()
    if adapter is None:
        return 1

    try:
        return run_command(adapter, args)
    except FilesystemError as e:
        logging.error(f"{e}", exc_info=e.__cause__ is not None)
        return 1
    except DropboxException as e:
        logging.error(f"Dropbox request failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
