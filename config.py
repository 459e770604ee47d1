"""
Stack configuration loaded from pulumi.Config().

Provides a typed, immutable view of stack settings read from Pulumi config
(e.g. Pulumi.<stack>.yaml or ``pulumi config set``). Only ``domain_name`` is
required; every other key has a default matching a small single-domain site.
Values are validated on construction so a bad setting fails the run before
any resource is declared. Used by __main__.main() to build the StaticSite
component.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pulumi

from website._helpers import is_bare_domain
from website.static_site import PRICE_CLASSES


class StackConfigError(pulumi.RunError):
    """Raised when a config value is present but invalid."""


def _require_str(config: pulumi.Config, key: str) -> str:
    return config.require(key)


def _optional(default: Any, convert: Callable[[str], Any]):
    def parse(config: pulumi.Config, key: str) -> Any:
        raw = config.get(key)
        if raw is None:
            return default
        try:
            return convert(raw)
        except ValueError as err:
            raise StackConfigError(f"config '{key}' is invalid: {raw!r}") from err

    return parse


def _to_bool(raw: str) -> bool:
    value = str(raw).strip().lower()
    if value in ("1", "true", "yes"):
        return True
    if value in ("0", "false", "no"):
        return False
    raise ValueError(raw)


# (key, parser); parser receives (config, key) and returns value.
_CONFIG_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("domain_name", _require_str),
    ("content_dir", _optional("www", str)),
    ("index_document", _optional("index.html", str)),
    ("error_document", _optional("404.html", str)),
    ("cache_ttl", _optional(30, int)),
    ("price_class", _optional("PriceClass_All", str)),
    ("certificate_region", _optional("us-east-1", str)),
    ("validation_record_ttl", _optional(60, int)),
    ("include_wildcard", _optional(True, _to_bool)),
]


@dataclass(frozen=True)
class StackConfig:
    """
    Stack configuration from Pulumi config.

    Attributes:
        domain_name: Apex domain the site is served on; also the site bucket
            name (required).
        content_dir: Directory of site files, relative to the project
            directory (default "www").
        index_document: Index document and CloudFront default root object.
        error_document: Document served for 404 responses.
        cache_ttl: Default and maximum CloudFront TTL in seconds.
        price_class: CloudFront price class.
        certificate_region: Region the ACM certificate is issued in.
        validation_record_ttl: TTL in seconds of the certificate DNS
            challenge record.
        include_wildcard: Whether the certificate also covers *.<domain>.
    """

    domain_name: str
    content_dir: str = "www"
    index_document: str = "index.html"
    error_document: str = "404.html"
    cache_ttl: int = 30
    price_class: str = "PriceClass_All"
    certificate_region: str = "us-east-1"
    validation_record_ttl: int = 60
    include_wildcard: bool = True

    def __post_init__(self):
        if not is_bare_domain(self.domain_name):
            raise StackConfigError(
                f"config 'domain_name' must be a bare domain such as "
                f"'example.com', got {self.domain_name!r}"
            )
        if not self.content_dir:
            raise StackConfigError("config 'content_dir' must not be empty")
        for key in ("index_document", "error_document"):
            document = getattr(self, key)
            if not document or document.startswith("/"):
                raise StackConfigError(
                    f"config '{key}' must be a path relative to the site "
                    f"root, got {document!r}"
                )
        for key in ("cache_ttl", "validation_record_ttl"):
            if getattr(self, key) < 0:
                raise StackConfigError(f"config '{key}' must not be negative")
        if self.price_class not in PRICE_CLASSES:
            raise StackConfigError(
                f"config 'price_class' must be one of {', '.join(PRICE_CLASSES)}, "
                f"got {self.price_class!r}"
            )
        if not self.certificate_region:
            raise StackConfigError("config 'certificate_region' must not be empty")

    @classmethod
    def from_pulumi_config(cls, config: pulumi.Config) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config(). Only domain_name is required.
        """
        kwargs = {key: parser(config, key) for key, parser in _CONFIG_SPEC}
        return cls(**kwargs)
