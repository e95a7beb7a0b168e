"""Dependency injection container for zimmount."""

from __future__ import annotations

from dataclasses import dataclass

from zimmount.config import ZimmountConfig
from zimmount.mounts.registry import MountRegistry
from zimmount.rewrite.html import HtmlRewriter


@dataclass
class Container:
    """DI container holding configuration, the mount registry and the rewriter."""

    config: ZimmountConfig
    registry: MountRegistry
    rewriter: HtmlRewriter

    @staticmethod
    def create_default(config: ZimmountConfig) -> Container:
        """Create a container that mounts every ZIM file in the archive directory."""
        from zimmount.adapters.zim_source import ZimContentSource

        registry = MountRegistry.from_directory(
            config.archives_dir,
            config.mount_base_path,
            opener=ZimContentSource.open,
        )

        return Container(
            config=config,
            registry=registry,
            rewriter=HtmlRewriter(parser=config.html_parser),
        )

    @staticmethod
    def create_for_testing(
        config: ZimmountConfig | None = None,
        registry: MountRegistry | None = None,
        rewriter: HtmlRewriter | None = None,
    ) -> Container:
        """Create a container without touching the filesystem.

        All parameters are optional. Provide a registry of test mounts for
        the archives you want served.
        """
        if config is None:
            config = ZimmountConfig(archives_dir="/nonexistent", static_dir="/nonexistent")

        return Container(
            config=config,
            registry=registry or MountRegistry(),
            rewriter=rewriter or HtmlRewriter(parser=config.html_parser),
        )
