"""Load and validate configuration YAML for site content builds.

This subpackage parses the site's ``site.yml`` plus the per-directory
``folder.yml``/``page.yml`` files, applies defaults, and produces typed
dataclasses (:class:`SiteConfig`, :class:`DirectoryConfig`) that the page tree
builder consumes. The primary entry points are :func:`load_site_config` and
:func:`load_directory_config`; neither raises on malformed YAML.

Examples
--------
>>> from pathlib import Path
>>> from content_tree.config import load_site_config
>>> site = load_site_config(Path("my-site"))  # doctest: +SKIP
>>> site.ordering.pages  # doctest: +SKIP
['home', 'about', '...']
"""

from .loader import build_directory_config, load_directory_config, load_site_config
from .models import ConfigError, ContentMode, DirectoryConfig, OrderConfig, SiteConfig

__all__ = [
    "ConfigError",
    "ContentMode",
    "DirectoryConfig",
    "OrderConfig",
    "SiteConfig",
    "build_directory_config",
    "load_directory_config",
    "load_site_config",
]
