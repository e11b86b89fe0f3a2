"""Well-known remote names and the rules for classifying them."""
import re
from typing import Optional

DIRECTORY_ROOT = ".SeedVaultAndroidBackup"
FILE_BACKUP_METADATA = ".backup.metadata"
FILE_NO_MEDIA = ".nomedia"
LEGACY_SNAPSHOT_SUFFIX = ".SeedSnap"

TOKEN_REGEX = re.compile(r"0|[1-9][0-9]{0,19}")
CHUNK_FOLDER_REGEX = re.compile(r"[a-f0-9]{2}")

MAX_TOKEN = 2 ** 64 - 1


def get_token_or_none(name: str) -> Optional[int]:
    """Parse a restore-set folder name, or return None if it is not a token."""
    if not name or not TOKEN_REGEX.fullmatch(name):
        return None
    try:
        token = int(name)
    except ValueError as e:
        # the regex must be wrong
        raise AssertionError(f"token pattern accepted unparseable name {name!r}") from e
    if token > MAX_TOKEN:
        return None
    return token


def is_unexpected_name(name: str) -> bool:
    return (
        name != FILE_NO_MEDIA
        and not CHUNK_FOLDER_REGEX.fullmatch(name)
        and not name.endswith(LEGACY_SNAPSHOT_SUFFIX)
    )
