"""Find restore sets by walking the backup root, without a separate index."""
import logging
from typing import Iterator, List, Optional

from ..plugins.base import EncryptedMetadata
from ..plugins.names import FILE_BACKUP_METADATA, get_token_or_none, is_unexpected_name
from .paths import resolve_location
from .storage import DavEntry, HrefRelation, WebDavStorage

LISTING_DEPTH = 2
LISTING_PROPERTIES = ("displayname", "resourcetype")


def find_tokens(storage: WebDavStorage, logger: logging.Logger) -> List[int]:
    """Return the tokens of all folders under the root that hold a metadata file.

    Tokens come back in the order the server listed them.
    """
    tokens: List[int] = []

    def on_entry(entry: DavEntry):
        logger.debug(f"getAvailableBackups() = {entry}")
        if (
            entry.relation != HrefRelation.SELF
            and not entry.is_collection
            and len(entry.segments) >= 2
            and entry.name == FILE_BACKUP_METADATA
        ):
            folder = entry.segments[-2]
            token = get_token_or_none(folder)
            if token is not None:
                tokens.append(token)
            elif is_unexpected_name(folder):
                logger.warning(f"Found invalid backup set folder: {folder}")

    storage.list_recursive(storage.root, LISTING_DEPTH, LISTING_PROPERTIES, on_entry)
    return tokens


def iter_backups(storage: WebDavStorage, tokens: List[int]) -> Iterator[EncryptedMetadata]:
    for token in tokens:
        location = resolve_location(storage.root, token, FILE_BACKUP_METADATA)
        yield EncryptedMetadata(token, lambda location=location: storage.open_read(location))


def get_available_backups(
    storage: WebDavStorage, logger: Optional[logging.Logger] = None
) -> Optional[Iterator[EncryptedMetadata]]:
    """List the restore sets on the server.

    Returns None, rather than an empty iterator, when the listing itself
    failed, so callers can tell "no backups" apart from "could not look".
    """
    logger = logger or storage.logger
    try:
        tokens = find_tokens(storage, logger)
    except AssertionError:
        raise
    except Exception as e:
        logger.error(f"Error getting available backups: {e}", exc_info=True)
        return None
    return iter_backups(storage, tokens)
