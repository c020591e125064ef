"""On-disk storage of deployed site files."""

import shutil
from pathlib import Path

from src.sitehost.core.config import SitesConfig

HTML_SUFFIXES = frozenset({".html", ".htm"})


class SiteDirectoryStore:
    """Owns the ``{static_root}/sites/{subdomain}`` directories."""

    def __init__(self, config: SitesConfig):
        self.config = config

    def path(self, subdomain: str) -> Path:
        return self.config.site_dir(subdomain)

    def exists(self, subdomain: str) -> bool:
        return self.path(subdomain).exists()

    def is_dir(self, subdomain: str) -> bool:
        return self.path(subdomain).is_dir()

    def remove(self, subdomain: str) -> bool:
        """Recursively delete the site directory. Returns False if it was absent."""
        site_dir = self.path(subdomain)
        if not site_dir.exists() and not site_dir.is_symlink():
            return False
        if site_dir.is_dir() and not site_dir.is_symlink():
            shutil.rmtree(site_dir)
        else:
            site_dir.unlink()
        return True

    def contains_html(self, subdomain: str) -> bool:
        """True if any ``*.html`` or ``*.htm`` file exists below the site directory."""
        site_dir = self.path(subdomain)
        if not site_dir.is_dir():
            return False
        return any(
            entry.suffix in HTML_SUFFIXES and entry.is_file() for entry in site_dir.rglob("*")
        )
