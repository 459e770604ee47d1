"""
Static website infrastructure.

- **StaticSite**: S3 website bucket with the site's files, CloudFront on the
  site's domain, Route 53 zone and records, ACM certificate validated by DNS.
- **collect_site_files**: enumerate a local directory into ``SiteFile``
  entries (bucket key, media type, local path); used by StaticSite and usable
  on its own to preview what will be published.
"""

from website.assets import AssetDirectoryError, SiteFile, collect_site_files
from website.static_site import StaticSite

__all__ = ["AssetDirectoryError", "SiteFile", "StaticSite", "collect_site_files"]
