"""Version information for jiralite.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "0.3.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 0.3.0 - Comment/changelog iterators, settings loader, NoResponse result type
# 0.2.0 - Search pagination generator
# 0.1.0 - Initial release (issue CRUD + assign)
