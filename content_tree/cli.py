"""Cyclopts CLI entrypoint for collecting a site's content tree.

The ``content-tree`` console script walks a site's pages directory and writes
the resulting site content document as JSON. Downstream tooling (translation
extraction, search indexing, prerendering) reads that file instead of walking
the content directories itself.

Examples
--------
Collect the site in the current directory into ``site-content.json``:

>>> from content_tree.cli import main
>>> main()  # doctest: +SKIP

Write the tree for another site to stdout:

>>> from content_tree.cli import app
>>> app(["collect", "--site-root", "docs-site", "--output", "-"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .collector import collect_site_content
from .config import ConfigError
from .serialize import dumps

DEFAULT_OUTPUT = Path("site-content.json")
STDOUT_MARKER = "-"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = App(name="content-tree", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Collect the site content tree and write it as JSON.")
def collect(
    *,
    site_root: typ.Annotated[
        Path, Parameter(help="Site directory holding site.yml", env_var="INPUT_SITE_ROOT")
    ] = Path(),
    pages_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the pages directory", env_var="INPUT_PAGES_DIR"),
    ] = None,
    output: typ.Annotated[
        str,
        Parameter(help="Output file, or '-' for stdout", env_var="INPUT_OUTPUT"),
    ] = str(DEFAULT_OUTPUT),
    verbose: typ.Annotated[
        bool, Parameter(help="Enable debug logging", env_var="INPUT_VERBOSE")
    ] = False,
) -> None:
    """Collect the content tree for ``site_root`` and write it as JSON.

    Parameters
    ----------
    site_root : Path, optional
        Directory containing ``site.yml`` and the pages directory
        (overridable via ``INPUT_SITE_ROOT``).
    pages_dir : Path or None, optional
        Pages directory override; relative paths resolve against
        ``site_root``.
    output : str, optional
        Destination file. ``-`` writes the document to stdout.
    verbose : bool, optional
        Log debug messages for every visited directory.

    Returns
    -------
    None
        Writes the JSON document and reports the written path.

    Raises
    ------
    SystemExit
        With status 1 when the site configuration is invalid. Nothing is
        written in that case.
    """
    _configure_logging(verbose)
    try:
        content = collect_site_content(site_root, pages_dir=pages_dir)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    document = dumps(content)
    if output == STDOUT_MARKER:
        sys.stdout.write(document + "\n")
        return

    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document + "\n", encoding="utf-8")
    print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``content-tree`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
