"""Mount registry: archive name -> mount, built once at startup."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from zimmount.core.errors import ArchiveOpenError, ConfigError
from zimmount.core.interfaces import ContentSourcePort
from zimmount.core.models import ArchiveMetadata, Mount, MountEntry

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zim"

SourceOpener = Callable[[Path], ContentSourcePort]


class MountRegistry:
    """Maps mount names to mounts.

    Populated during startup and only read afterwards, so it can be
    shared by concurrent requests without locking.
    """

    def __init__(self, mounts: list[Mount] | None = None) -> None:
        self._mounts: dict[str, Mount] = {}
        for mount in mounts or []:
            self.register(mount)

    def register(self, mount: Mount) -> None:
        """Register a mount. Names must be unique."""
        if mount.name in self._mounts:
            raise ValueError(f"Duplicate mount name: {mount.name!r}")
        self._mounts[mount.name] = mount

    def get(self, name: str) -> Mount | None:
        """Look up a mount by name."""
        return self._mounts.get(name)

    def __iter__(self) -> Iterator[Mount]:
        return iter(self._mounts.values())

    def __len__(self) -> int:
        return len(self._mounts)

    def entries(self, server_url: str = "") -> list[MountEntry]:
        """Dashboard snapshot of every mount, ordered by name.

        Args:
            server_url: Optional origin prepended to each mount prefix,
                e.g. "http://localhost:8000".
        """
        result = []
        for name in sorted(self._mounts):
            mount = self._mounts[name]
            metadata = mount.metadata or ArchiveMetadata(file_name=name, title=name)
            result.append(
                MountEntry(
                    file_name=metadata.file_name,
                    title=metadata.title,
                    description=metadata.description,
                    access_url=f"{server_url.rstrip('/')}{mount.url_prefix}",
                )
            )
        return result

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        base_path: str,
        opener: SourceOpener,
    ) -> MountRegistry:
        """Open every archive in a directory and mount it under base_path.

        Archives that fail to open are skipped with a warning. A missing
        directory yields an empty registry.

        Args:
            directory: Directory containing *.zim files.
            base_path: Namespace root for mounts, e.g. "/zim/".
            opener: Opens one archive file as a content source.

        Raises:
            ConfigError: If the path exists but is not a directory.
        """
        root = Path(directory).expanduser()
        registry = cls()

        if not root.exists():
            logger.info("Archive directory %s does not exist; no archives mounted", root)
            return registry
        if not root.is_dir():
            raise ConfigError(f"Archive path is not a directory: {root}")

        for path in sorted(root.iterdir()):
            if not path.is_file() or path.suffix != ARCHIVE_SUFFIX:
                continue
            try:
                source = opener(path)
            except ArchiveOpenError as e:
                logger.warning("Skipping %s: %s", path.name, e)
                continue

            mount = Mount(
                name=path.stem,
                url_prefix=f"{base_path}{path.stem}/",
                content_source=source,
                metadata=source.metadata(),
            )
            registry.register(mount)
            logger.info("Loaded %s for serving at %s", path.name, mount.url_prefix)

        return registry
