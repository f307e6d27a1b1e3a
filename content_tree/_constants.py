"""Common literal values used across content_tree.

These constants keep filenames and reserved names centralized so the loader,
collector, and tests can import the same values without drifting. Intended for
internal use within the content_tree package.

Examples
--------
>>> from content_tree import _constants
>>> _constants.PAGE_CONFIG
'page.yml'
>>> _constants.WILDCARD in ["hero", "..."]
True
"""

SITE_CONFIG = "site.yml"
PAGE_CONFIG = "page.yml"
FOLDER_CONFIG = "folder.yml"
DEFAULT_PAGES_DIR = "pages"

CONTENT_SUFFIX = ".md"
WILDCARD = "..."

ROOT_ROUTE = "/"
LAYOUT_AREA_PREFIX = "@"
NOT_FOUND_PAGE = "404"
DEFAULT_SECTION_TYPE = "Section"
DRAFT_PREFIX = "_"
