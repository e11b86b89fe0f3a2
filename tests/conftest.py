"""Pytest configuration and fixtures."""
import logging
from typing import Dict, Optional
from urllib.parse import quote

import httpx
import pytest
from webdav4.client import Client

from vaultdav.webdav.plugin import WebDavStoragePlugin
from vaultdav.webdav.storage import WebDavStorage

BASE_URL = "http://dav.test/remote.php/dav"
BASE_PATH = "/remote.php/dav"


class FakeDavServer:
    """In-memory WebDAV server, plugged into httpx as a MockTransport handler.

    ``nodes`` maps a path relative to the base URL to its bytes, or to None
    for a collection. Listings come back in insertion order. ``failures``
    maps a method to a status code to answer with, or an exception to raise.
    ``forbidden`` paths show up in listings with a 403 status.
    """

    def __init__(self):
        self.nodes: Dict[str, Optional[bytes]] = {"": None}
        self.requests = []
        self.failures = {}
        self.forbidden = set()

    def mkdirs(self, path: str):
        parts = path.strip("/").split("/")
        for i in range(1, len(parts) + 1):
            self.nodes.setdefault("/".join(parts[:i]), None)

    def put(self, path: str, content: bytes = b""):
        path = path.strip("/")
        self.mkdirs(path.rpartition("/")[0])
        self.nodes[path] = content

    def count(self, method):
        return sum(1 for request in self.requests if request.method == method)

    def _href(self, path):
        suffix = "/" if self.nodes[path] is None else ""
        return f"{BASE_PATH}/{quote(path)}{suffix}" if path else f"{BASE_PATH}/"

    def _multistatus(self, root, depth):
        parts = []
        for path, content in self.nodes.items():
            if root and path != root and not path.startswith(root + "/"):
                continue
            below = path[len(root):].strip("/")
            level = len(below.split("/")) if below else 0
            if level > depth:
                continue
            if path in self.forbidden:
                parts.append(
                    f"<d:response><d:href>{self._href(path)}</d:href>"
                    f"<d:status>HTTP/1.1 403 Forbidden</d:status></d:response>"
                )
                continue
            resourcetype = "<d:collection/>" if content is None else ""
            parts.append(
                f"<d:response><d:href>{self._href(path)}</d:href>"
                f"<d:propstat><d:prop><d:displayname>{path.rpartition('/')[2]}</d:displayname>"
                f"<d:resourcetype>{resourcetype}</d:resourcetype></d:prop>"
                f"<d:status>HTTP/1.1 200 OK</d:status></d:propstat></d:response>"
            )
        return ('<?xml version="1.0"?><d:multistatus xmlns:d="DAV:">' + "".join(parts) + "</d:multistatus>").encode()

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method = request.method
        failure = self.failures.get(method)
        if isinstance(failure, int):
            return httpx.Response(failure)
        if failure is not None:
            raise failure

        path = request.url.path[len(BASE_PATH):].strip("/")
        parent = path.rpartition("/")[0]
        exists = path in self.nodes
        if method == "HEAD":
            return httpx.Response(200 if exists else 404)
        if method == "MKCOL":
            if exists:
                return httpx.Response(405)
            if parent not in self.nodes:
                return httpx.Response(409)
            self.nodes[path] = None
            return httpx.Response(201)
        if method == "PUT":
            if parent not in self.nodes:
                return httpx.Response(409)
            self.nodes[path] = request.content
            return httpx.Response(201)
        if method == "GET":
            if not exists:
                return httpx.Response(404)
            return httpx.Response(200, content=self.nodes[path] or b"")
        if method == "DELETE":
            if not exists:
                return httpx.Response(404)
            for key in [k for k in self.nodes if k == path or k.startswith(path + "/")]:
                del self.nodes[key]
            return httpx.Response(204)
        if method == "PROPFIND":
            if not exists:
                return httpx.Response(404)
            depth = int(request.headers["Depth"])
            return httpx.Response(207, content=self._multistatus(path, depth))
        return httpx.Response(501)


@pytest.fixture
def dav():
    return FakeDavServer()


@pytest.fixture
def client(dav):
    http_client = httpx.Client(transport=httpx.MockTransport(dav.handle))
    return Client(BASE_URL, http_client=http_client, retry=False)


@pytest.fixture
def logger():
    return logging.getLogger("vaultdav.test")


@pytest.fixture
def storage(client, logger):
    return WebDavStorage(client, ".SeedVaultAndroidBackup", logger)


@pytest.fixture
def plugin(client, logger):
    return WebDavStoragePlugin(client, logger=logger)
