import logging
from typing import Any, BinaryIO, Iterator, Optional

from webdav4.client import Client

from ..errors import TransportFailure
from ..plugins.base import EncryptedMetadata, StoragePlugin
from ..plugins.names import DIRECTORY_ROOT
from .discovery import get_available_backups
from .paths import resolve_location
from .storage import WebDavStorage

PROVIDER_PACKAGE_NAME = "vaultdav"


class WebDavStoragePlugin(StoragePlugin):
    """Stores restore sets as ``root/<token>/<name>`` on a WebDAV server."""
    name = "webdav"

    def __init__(self, client: Client, root: str = DIRECTORY_ROOT, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("vaultdav")
        self.storage = WebDavStorage(client, root, self.logger)
        self.root = root

    def initialize_device(self) -> None:
        if self.storage.exists(self.root):
            self.logger.debug(f"Root exists: {self.root}")
            return
        self.storage.create_collection(self.root)
        self.logger.debug(f"initializeDevice() created {self.root}")

    def start_new_restore_set(self, token: int) -> None:
        self.storage.create_collection(resolve_location(self.root, token))
        self.logger.debug(f"startNewRestoreSet({token}) done")

    def has_data(self, token: int, name: str) -> bool:
        found = self.storage.exists(resolve_location(self.root, token, name))
        self.logger.debug(f"hasData({token}, {name}) = {found}")
        return found

    def get_output_stream(self, token: int, name: str) -> BinaryIO:
        # upload failures surface from close()
        return self.storage.open_write(
            resolve_location(self.root, token, name), label=f"OutputStream for {token} and {name}"
        )

    def get_input_stream(self, token: int, name: str) -> BinaryIO:
        try:
            return self.storage.open_read(resolve_location(self.root, token, name))
        except OSError as e:
            raise TransportFailure(f"Error getting InputStream for {token} and {name}: {e}") from e

    def remove_data(self, token: int, name: str) -> None:
        # deleting something that is already gone is reported, not ignored
        try:
            self.storage.delete(resolve_location(self.root, token, name))
        except OSError as e:
            raise TransportFailure(f"Error removing {name} of {token}: {e}") from e
        self.logger.debug(f"removeData({token}, {name}) done")

    def has_backup(self, storage: Any) -> bool:
        # TODO check the restore sets of the given storage once backend selection passes one in
        return True

    def get_available_backups(self) -> Optional[Iterator[EncryptedMetadata]]:
        return get_available_backups(self.storage, self.logger)

    @property
    def provider_package_name(self) -> str:
        # built into the host application, not a third-party provider
        return PROVIDER_PACKAGE_NAME

    def test_connection(self) -> bool:
        try:
            self.storage.list_recursive("", 0, ("resourcetype",), lambda entry: None)
            return True
        except OSError as e:
            self.logger.debug(f"Connection test failed: {e}")
            return False
