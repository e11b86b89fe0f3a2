"""Exceptions raised by vaultdav."""


class VaultDavError(Exception):
    """Base class for all vaultdav errors."""


class TransportFailure(VaultDavError, OSError):
    """A remote call failed for any reason other than the resource being absent.

    The underlying exception is always chained as ``__cause__``.
    """


class ResourceAbsent(VaultDavError, FileNotFoundError):
    """The remote service confirmed the resource or collection does not exist."""


class ConfigError(VaultDavError, ValueError):
    pass
