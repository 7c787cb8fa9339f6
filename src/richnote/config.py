"""Configuration loader for richnote.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore


@dataclass
class VaultConfig:
    """Host vault configuration."""
    root: Path


@dataclass
class RichConfig:
    """Rich-dialect mirror configuration."""
    mirror: Path


@dataclass
class TranscodeConfig:
    """Which optional conversions run."""
    frontmatter: bool = True
    embeds: bool = True
    links: bool = True


@dataclass
class WatchConfig:
    """Mirror watcher configuration."""
    debounce_ms: int = 150


@dataclass
class UIConfig:
    """Theme values served to the rendering surface by ``GET /ui``."""
    dark: bool = False


@dataclass
class RichnoteConfig:
    """Complete richnote configuration."""
    vault: VaultConfig
    rich: RichConfig
    transcode: TranscodeConfig = field(default_factory=TranscodeConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> RichnoteConfig:
    """
    Load configuration from richnote.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/richnote.toml
    3. vault_path/richnote.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path for fallback search

    Returns:
        RichnoteConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "richnote.toml")
    if vault_path:
        search_paths.append(vault_path / "richnote.toml")

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    vault_data = toml_data.get("vault", {})
    vault_root = Path(vault_data.get("root", vault_path or Path("./vault")))

    # Mirror path stays relative to the vault unless absolute
    rich_data = toml_data.get("rich", {})
    mirror = Path(rich_data.get("mirror", ".richnote"))

    transcode_data = toml_data.get("transcode", {})
    transcode_config = TranscodeConfig(
        frontmatter=transcode_data.get("frontmatter", True),
        embeds=transcode_data.get("embeds", True),
        links=transcode_data.get("links", True),
    )

    watch_data = toml_data.get("watch", {})
    watch_config = WatchConfig(debounce_ms=watch_data.get("debounce_ms", 150))

    ui_data = toml_data.get("ui", {})
    ui_config = UIConfig(dark=ui_data.get("dark", False))

    return RichnoteConfig(
        vault=VaultConfig(root=vault_root),
        rich=RichConfig(mirror=mirror),
        transcode=transcode_config,
        watch=watch_config,
        ui=ui_config,
    )
