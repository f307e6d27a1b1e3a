"""Per-build state shared by the collector stages."""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import SiteConfig
    from .document import MarkdownConverter
    from .mounts import Mount

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class Capabilities:
    """External tools available to this build."""

    ffmpeg: bool = False

    @classmethod
    def probe(cls) -> Capabilities:
        """Look for optional tools on ``PATH``."""
        ffmpeg = shutil.which("ffmpeg") is not None
        logger.debug("ffmpeg available: %s", ffmpeg)
        return cls(ffmpeg=ffmpeg)


@dc.dataclass(frozen=True, slots=True)
class BuildContext:
    """Everything a collection run needs besides the directory being walked.

    Attributes
    ----------
    site : SiteConfig
        The loaded ``site.yml`` settings.
    converter : MarkdownConverter
        Converts section bodies into rich documents.
    mounts : Mapping[str, Mount]
        Validated mounts keyed by top-level route segment.
    capabilities : Capabilities
        Tool probe results, computed once per build.
    """

    site: SiteConfig
    converter: MarkdownConverter
    mounts: typ.Mapping[str, Mount] = dc.field(default_factory=dict)
    capabilities: Capabilities = dc.field(default_factory=Capabilities)

    @property
    def site_root(self) -> Path:
        """Return the site directory."""
        return self.site.root


__all__ = ["BuildContext", "Capabilities"]
