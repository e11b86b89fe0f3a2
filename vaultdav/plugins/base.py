from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Iterator, Optional


@dataclass(frozen=True)
class EncryptedMetadata:
    """One discovered restore set.

    ``input_stream`` opens a new stream to the set's metadata each time it is
    called; nothing is fetched until then.
    """
    token: int
    input_stream: Callable[[], BinaryIO]


class StoragePlugin(ABC):
    name: str = "base"

    @abstractmethod
    def initialize_device(self) -> None:
        pass

    @abstractmethod
    def start_new_restore_set(self, token: int) -> None:
        pass

    @abstractmethod
    def has_data(self, token: int, name: str) -> bool:
        pass

    @abstractmethod
    def get_output_stream(self, token: int, name: str) -> BinaryIO:
        pass

    @abstractmethod
    def get_input_stream(self, token: int, name: str) -> BinaryIO:
        pass

    @abstractmethod
    def remove_data(self, token: int, name: str) -> None:
        pass

    @abstractmethod
    def has_backup(self, storage: Any) -> bool:
        pass

    @abstractmethod
    def get_available_backups(self) -> Optional[Iterator[EncryptedMetadata]]:
        """Return the restore sets on the backend, or None if they could not be listed."""

    @property
    @abstractmethod
    def provider_package_name(self) -> str:
        pass
