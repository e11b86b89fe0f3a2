from .plugin import WebDavStoragePlugin
from .storage import DavEntry, HrefRelation, WebDavStorage

__all__ = ["WebDavStoragePlugin", "WebDavStorage", "DavEntry", "HrefRelation"]
