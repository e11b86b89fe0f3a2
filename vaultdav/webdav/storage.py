"""Blocking WebDAV primitives that fail only with ResourceAbsent or TransportFailure."""
import io
import logging
import tempfile
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Iterable, Optional, Tuple

import httpx
from webdav4.client import Client, ResourceNotFound

from ..errors import ResourceAbsent, TransportFailure

# uploads larger than this are spooled to a temporary file
SPOOL_MAX_SIZE = 4 * 1024 * 1024


class HrefRelation(Enum):
    SELF = "self"
    MEMBER = "member"
    DESCENDANT = "descendant"


@dataclass(frozen=True)
class DavEntry:
    href: str
    segments: Tuple[str, ...]
    is_collection: bool
    relation: HrefRelation

    @property
    def name(self) -> str:
        return self.segments[-1] if self.segments else ""


def _path_segments(path: str) -> Tuple[str, ...]:
    return tuple(s for s in path.split("/") if s)


def _propfind_body(properties: Iterable[str]) -> str:
    props = "".join(f"<d:{p}/>" for p in properties)
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<d:propfind xmlns:d="DAV:"><d:prop>{props}</d:prop></d:propfind>'
    )


class _UploadStream(io.RawIOBase):
    """Spools writes locally and uploads them to the remote location on close()."""

    def __init__(self, storage: "WebDavStorage", location: str, label: str, max_size: int):
        super().__init__()
        self._storage = storage
        self._location = location
        self._label = label
        self._spool = tempfile.SpooledTemporaryFile(max_size=max_size)

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        return self._spool.write(b)

    def close(self):
        if self.closed:
            return
        try:
            size = self._spool.tell()
            self._spool.seek(0)
            self._storage.upload(self._spool, self._location, size)
        except OSError as e:
            raise TransportFailure(f"Error writing {self._label}: {e}") from e
        finally:
            self._spool.close()
            super().close()

    def __del__(self):
        # a stream that was never closed is dropped, not uploaded
        if not self.closed:
            self._spool.close()
            io.RawIOBase.close(self)


class WebDavStorage:
    """Thin layer over a webdav4 client.

    Every call returns a typed result or raises ResourceAbsent (the server
    answered 404) or TransportFailure (anything else, cause chained).
    """

    def __init__(
        self,
        client: Client,
        root: str,
        logger: Optional[logging.Logger] = None,
        spool_max_size: int = SPOOL_MAX_SIZE,
    ):
        self.client = client
        self.root = root
        self.logger = logger or logging.getLogger("vaultdav")
        self.spool_max_size = spool_max_size

    def _call(self, action: str, location: str, func: Callable, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ResourceNotFound as e:
            raise ResourceAbsent(f"{action} {location}: not found") from e
        except Exception as e:
            raise TransportFailure(f"{action} {location} failed: {e}") from e

    def _request(self, method: str, location: str, **kwargs) -> httpx.Response:
        return self._call(method, location, self.client.request, method, location, **kwargs)

    def create_collection(self, location: str) -> None:
        response = self._request("MKCOL", location)
        self.logger.debug(f"createCollection({location}) = {response}")

    def exists(self, location: str) -> bool:
        try:
            response = self._request("HEAD", location)
        except ResourceAbsent as e:
            self.logger.debug(f"exists({location}) = {e}")
            return False
        self.logger.debug(f"exists({location}) = {response}")
        return response.is_success

    def delete(self, location: str) -> None:
        response = self._request("DELETE", location)
        self.logger.debug(f"delete({location}) = {response}")

    def open_read(self, location: str) -> BinaryIO:
        response = self._request("GET", location)
        return io.BytesIO(response.content)

    def open_write(self, location: str, label: Optional[str] = None) -> BinaryIO:
        """Return a stream that uploads to ``location`` when it is closed.

        Failures of the upload are raised from ``close()`` as TransportFailure,
        described by ``label``.
        """
        return _UploadStream(self, location, label or location, self.spool_max_size)

    def upload(self, file_obj: BinaryIO, location: str, size: int) -> None:
        self._call(
            "PUT", location, self.client.upload_fileobj, file_obj, location, overwrite=True, size=size
        )
        self.logger.debug(f"upload({location}) = {size} bytes")

    def list_recursive(
        self,
        location: str,
        depth: int,
        properties: Iterable[str],
        on_entry: Callable[[DavEntry], None],
    ) -> None:
        """PROPFIND ``location`` down to ``depth`` and hand every entry to ``on_entry``.

        Entries the server reports with an error status are skipped.
        """
        result = self._call(
            "PROPFIND",
            location,
            self.client.propfind,
            location,
            data=_propfind_body(properties),
            headers={"Depth": str(depth), "Content-Type": "application/xml; charset=utf-8"},
        )
        base = _path_segments(self.client.join_url(location).path)
        for response in result.responses.values():
            if response.status_code is not None and response.status_code >= 400:
                self.logger.debug(f"Skipping {response.href}: {response.status_code} {response.reason_phrase}")
                continue
            segments = _path_segments(response.path)
            if segments[:len(base)] != base:
                self.logger.debug(f"Skipping entry outside of {location}: {response.href}")
                continue
            relative = segments[len(base):]
            if not relative:
                relation = HrefRelation.SELF
            elif len(relative) == 1:
                relation = HrefRelation.MEMBER
            else:
                relation = HrefRelation.DESCENDANT
            on_entry(DavEntry(
                href=response.href,
                segments=relative,
                is_collection=bool(response.properties.collection),
                relation=relation,
            ))
