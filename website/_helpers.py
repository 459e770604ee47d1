"""
Pure helpers for domain and path naming. Testable without Pulumi runtime.

Used by the StaticSite component (wildcard_domain, site_url, error_page_path,
log_prefix, first_validation_option) and by config validation
(is_bare_domain). No Pulumi resources are created here; functions accept and
return plain Python values so they can be unit-tested without a stack.
"""

from typing import Sequence, TypeVar

T = TypeVar("T")


def wildcard_domain(
    domain: str,
) -> str:
    """
    Return the wildcard name covering every subdomain of domain.

    Used as the certificate's subject alternative name so that e.g.
    ``www.example.com`` is served by the same certificate as the apex.
    """
    return f"*.{domain.rstrip('.')}"


def site_url(
    domain: str,
) -> str:
    """Return the public HTTPS URL for the apex domain."""
    return f"https://{domain.rstrip('.')}"


def error_page_path(
    document: str,
) -> str:
    """
    Return the CloudFront response page path for an error document.

    CloudFront expects an absolute path; ``404.html`` becomes ``/404.html``.
    """
    return f"/{document.lstrip('/')}"


def log_prefix(
    domain: str,
) -> str:
    """
    Return the key prefix CloudFront access logs are written under.

    Logs are grouped per site so one log bucket can be shared.
    """
    return f"{domain.rstrip('.')}/"


def first_validation_option(
    options: Sequence[T],
) -> T:
    """
    Return the first ACM domain-validation option.

    The apex and its wildcard share a single DNS challenge, so the first
    option is enough to validate the whole certificate.

    Raises:
        ValueError: If the certificate reported no validation options.
    """
    if not options:
        raise ValueError("certificate has no domain validation options")
    return options[0]


def is_bare_domain(
    domain: str,
) -> bool:
    """
    Return True if domain is a host name only: no scheme, path or port.

    A trailing dot is rejected as well; Route 53 and ACM are given the
    relative form. The domain also names the site bucket, so it must be
    lowercase with no whitespace or empty labels.
    """
    if not domain or any(char.isspace() for char in domain):
        return False
    if domain != domain.lower() or ".." in domain:
        return False
    if "://" in domain or "/" in domain or ":" in domain:
        return False
    if domain.endswith(".") or domain.startswith("."):
        return False
    return "." in domain
