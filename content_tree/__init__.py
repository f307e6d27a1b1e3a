"""Build normalized site content trees from Markdown and YAML directories.

This package exposes the ``content-tree`` CLI plus the library entry points
used by build tooling to walk a site's pages directory.

Exports
-------
- ``app``: Cyclopts application behind the ``content-tree`` command.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``collect_site_content``: Collect a site synchronously.
- ``collect_site_content_async``: Collect a site from inside an event loop.

Examples
--------
>>> from content_tree import collect_site_content
>>> site = collect_site_content("my-site")  # doctest: +SKIP
>>> site.get_page("/").title  # doctest: +SKIP
'Home'
"""

from __future__ import annotations

from .cli import app, main
from .collector import collect_site_content, collect_site_content_async

__all__ = ["app", "collect_site_content", "collect_site_content_async", "main"]
