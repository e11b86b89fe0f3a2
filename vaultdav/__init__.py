"""vaultdav: WebDAV storage plugin for encrypted backups."""
__version__ = "0.3.0"
