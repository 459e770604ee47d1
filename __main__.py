"""
Static website - Pulumi entrypoint.

Reads the stack configuration and declares one StaticSite component: the
files under ``content_dir`` (resolved against the working directory, i.e. the
project directory when run by ``pulumi up``) are published to an S3 website
bucket served by CloudFront on ``domain_name`` over a DNS-validated ACM
certificate.

Stack exports: bucket_name, website_endpoint, cdn_domain, cdn_url, site_url,
name_servers.
"""

import os

import pulumi

from config import StackConfig
from website import StaticSite


def main():
    """
    Build the StaticSite component and export stack outputs.

    Any config or filesystem error is raised before the first resource is
    declared, so the run fails with nothing handed to the engine.
    """
    config = StackConfig.from_pulumi_config(pulumi.Config())

    site = StaticSite(
        name=pulumi.get_project(),
        domain_name=config.domain_name,
        content_dir=os.path.join(os.getcwd(), config.content_dir),
        index_document=config.index_document,
        error_document=config.error_document,
        cache_ttl=config.cache_ttl,
        price_class=config.price_class,
        certificate_region=config.certificate_region,
        validation_record_ttl=config.validation_record_ttl,
        include_wildcard=config.include_wildcard,
    )

    for output_name, value in [
        ("bucket_name", site.bucket_name),
        ("website_endpoint", site.website_endpoint),
        ("cdn_domain", site.cdn_domain_name),
        ("cdn_url", site.cdn_url),
        ("site_url", site.site_url),
        ("name_servers", site.name_servers),
    ]:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
