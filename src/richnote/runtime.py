"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsDocumentStore, FsLinkResolver
from .config import RichnoteConfig, load_config
from .session import EditSession
from .transcode import TranscodeOptions


@dataclass
class Runtime:
    """Container for all wired components."""
    store: FsDocumentStore
    mirror: FsDocumentStore
    resolver: FsLinkResolver
    options: TranscodeOptions
    config: RichnoteConfig

    def session(self, path: str) -> EditSession:
        return EditSession(self.store, path, resolver=self.resolver, options=self.options)


def build_runtime(
    vault_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    # Use config values if CLI args not provided
    if vault_path is None:
        vault_path = config.vault.root

    mirror_path = config.rich.mirror
    if not mirror_path.is_absolute():
        mirror_path = vault_path / mirror_path

    options = TranscodeOptions(
        frontmatter=config.transcode.frontmatter,
        embeds=config.transcode.embeds,
        links=config.transcode.links,
    )

    return Runtime(
        store=FsDocumentStore(vault_path),
        mirror=FsDocumentStore(mirror_path),
        resolver=FsLinkResolver(vault_path),
        options=options,
        config=config,
    )
