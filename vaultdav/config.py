"""vaultdav configuration management."""
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigError
from .plugins.names import DIRECTORY_ROOT

CONFIG_PATH = Path.home() / ".vaultdav" / "config.json"


@dataclass
class WebDavConfig:
    url: str
    username: str = ""
    password: str = ""
    root: str = DIRECTORY_ROOT
    timeout: float = 30.0

    @classmethod
    def from_dict(cls, data: dict) -> "WebDavConfig":
        if not data.get("url"):
            raise ConfigError("WebDAV url is not configured. Run: vaultdav config --url <url>")
        return cls(
            url=data["url"],
            username=data.get("username", ""),
            password=data.get("password", ""),
            root=data.get("root") or DIRECTORY_ROOT,
            timeout=float(data.get("timeout", 30.0)),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def get_config() -> dict:
    if CONFIG_PATH.exists():
        return json.loads(CONFIG_PATH.read_text())
    return {}


def save_config(config: dict):
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(config, indent=2))
    CONFIG_PATH.chmod(0o600)


def get_plugin(config: Optional[WebDavConfig] = None, logger=None):
    if config is None:
        config = WebDavConfig.from_dict(get_config())
    from webdav4.client import Client
    from .webdav.plugin import WebDavStoragePlugin
    auth = (config.username, config.password) if config.username else None
    client = Client(config.url, auth=auth, timeout=config.timeout)
    return WebDavStoragePlugin(client, root=config.root, logger=logger)
