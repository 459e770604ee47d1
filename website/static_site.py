"""
AWS static website: S3 bucket + CloudFront + Route 53 + ACM certificate.

This component publishes every file under a local directory into a
public-read S3 website bucket and puts a CloudFront distribution in front of
it on the site's own domain. The domain gets a Route 53 hosted zone, an ACM
certificate validated through a DNS record in that zone, and an apex ``A``
alias record pointing at the distribution. Request logs go to a private
bucket.

The certificate and its validation are declared on a dedicated provider
pinned to ``certificate_region`` (``us-east-1`` by default): CloudFront only
accepts ACM certificates issued there, whatever region the rest of the stack
uses.

Every cross-reference is an ``Output`` (validation record from the
certificate's challenge, distribution from the validated certificate and the
bucket's website endpoint, alias record from the distribution), so the Pulumi
engine derives creation order from the data itself.
"""

import pulumi
import pulumi_aws as aws

from website._helpers import (
    error_page_path,
    first_validation_option,
    log_prefix,
    site_url,
    wildcard_domain,
)
from website.assets import SiteFile, collect_site_files

ID: str = "staticsite:aws:StaticSite"

ORIGIN_ID: str = "s3-website-origin"

# CloudFront price classes, broadest (and most expensive) first.
PRICE_CLASSES: tuple[str, ...] = ("PriceClass_All", "PriceClass_200", "PriceClass_100")


class StaticSite(pulumi.ComponentResource):
    """
    Public S3 website bucket with its files, served by CloudFront over TLS.

    Resources: Bucket (site), BucketObject per file, Bucket (logs), Zone,
    Provider (certificate region), Certificate, Record (validation),
    CertificateValidation, Distribution, Record (apex alias).

    The bucket and its objects rely on ``public-read`` ACLs. Accounts with
    the post-2023 S3 defaults (ObjectOwnership ``BucketOwnerEnforced`` and
    account-level Block Public Access) reject those ACLs at apply time; such
    accounts must allow ACLs and public access before deploying.
    """

    def __init__(
        self,
        name: str,
        domain_name: str,
        content_dir: str,
        index_document: str = "index.html",
        error_document: str = "404.html",
        cache_ttl: int = 30,
        price_class: str = "PriceClass_All",
        certificate_region: str = "us-east-1",
        validation_record_ttl: int = 60,
        include_wildcard: bool = True,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """
        Enumerate content_dir, then declare the hosting resources.

        Args:
            name: Pulumi resource name; prefixes the skeleton resources.
            domain_name: Apex domain the site is served on (e.g.
                "example.com"); also the site bucket's name.
            content_dir: Directory whose files are published. Its relative
                paths become object keys.
            index_document: Bucket index document and CloudFront default root
                object.
            error_document: Bucket error document and CloudFront 404 page.
            cache_ttl: Default and maximum CloudFront TTL in seconds.
            price_class: CloudFront price class (see PRICE_CLASSES).
            certificate_region: Region of the provider used for the ACM
                certificate and its validation.
            validation_record_ttl: TTL in seconds of the DNS challenge record.
            include_wildcard: If True, the certificate also covers
                ``*.<domain_name>``.
            opts: Options for the component itself.

        Raises:
            AssetDirectoryError: If content_dir cannot be enumerated. Raised
                before any resource is registered.

        Outputs (set on self, registered for the component):
            bucket_name: Site bucket name.
            website_endpoint: S3 website endpoint (CloudFront origin).
            cdn_domain_name: Distribution FQDN.
            cdn_url: HTTPS URL of the distribution.
            site_url: HTTPS URL of the apex domain.
            name_servers: Hosted zone name servers; delegate the domain to
                these at the registrar.
        """
        # Enumerate first: an unreadable tree must fail before the component
        # or any child is registered with the engine.
        self.files: list[SiteFile] = collect_site_files(content_dir)

        super().__init__(ID, name, None, opts)

        # Child resources get parent=self so Pulumi builds a proper hierarchy
        # for lifecycle order and UI grouping.
        child_opts = pulumi.ResourceOptions(parent=self)

        # Create the site bucket.
        # Named after the domain and configured for website hosting so
        # CloudFront can use its website endpoint as a custom origin.
        self.bucket = aws.s3.Bucket(
            resource_name=f"{name}-bucket",
            bucket=domain_name,
            acl="public-read",
            website=aws.s3.BucketWebsiteArgs(
                index_document=index_document,
                error_document=error_document,
            ),
            opts=child_opts,
        )

        # One object per file, keyed by its relative path. Parent is the
        # bucket for grouping in the plan output only.
        object_opts = pulumi.ResourceOptions(parent=self.bucket)
        self.objects: list[aws.s3.BucketObject] = [
            aws.s3.BucketObject(
                resource_name=site_file.key,
                bucket=self.bucket.id,
                key=site_file.key,
                acl="public-read",
                content_type=site_file.content_type,
                source=pulumi.FileAsset(site_file.path),
                opts=object_opts,
            )
            for site_file in self.files
        ]
        pulumi.log.info(
            f"publishing {len(self.objects)} file(s) from {content_dir}",
            resource=self,
        )

        # Create the request log bucket.
        self.logs_bucket = aws.s3.Bucket(
            resource_name=f"{name}-request-logs",
            acl="private",
            opts=child_opts,
        )

        # Create the hosted zone for the domain.
        self.zone = aws.route53.Zone(
            resource_name=f"{name}-zone",
            name=domain_name,
            opts=child_opts,
        )

        # CloudFront only accepts ACM certificates from us-east-1, so the
        # certificate and its validation use their own regional provider.
        certificate_provider = aws.Provider(
            resource_name=f"{name}-{certificate_region}",
            region=certificate_region,
            opts=child_opts,
        )
        certificate_opts = pulumi.ResourceOptions(
            parent=self,
            provider=certificate_provider,
        )

        # Create the certificate, validated through DNS.
        subject_alternative_names = (
            [wildcard_domain(domain_name)] if include_wildcard else None
        )
        self.certificate = aws.acm.Certificate(
            resource_name=f"{name}-cert",
            domain_name=domain_name,
            subject_alternative_names=subject_alternative_names,
            validation_method="DNS",
            tags={"Name": domain_name},
            opts=certificate_opts,
        )

        # Create the DNS challenge record from the first validation option.
        validation_option = self.certificate.domain_validation_options.apply(
            first_validation_option
        )
        self.validation_record = aws.route53.Record(
            resource_name=f"{name}-cert-validation-record",
            name=validation_option.resource_record_name,
            zone_id=self.zone.zone_id,
            type=validation_option.resource_record_type,
            records=[validation_option.resource_record_value],
            ttl=validation_record_ttl,
            opts=pulumi.ResourceOptions(parent=self.zone),
        )

        # Wait for ACM to see the challenge record.
        self.certificate_validation = aws.acm.CertificateValidation(
            resource_name=f"{name}-cert-validation",
            certificate_arn=self.certificate.arn,
            validation_record_fqdns=[self.validation_record.fqdn],
            opts=certificate_opts,
        )

        # The S3 website endpoint only speaks HTTP, so the origin is a custom
        # origin with http-only protocol policy.
        origins = [
            aws.cloudfront.DistributionOriginArgs(
                origin_id=ORIGIN_ID,
                domain_name=self.bucket.website_endpoint,
                custom_origin_config=aws.cloudfront.DistributionOriginCustomOriginConfigArgs(
                    origin_protocol_policy="http-only",
                    http_port=80,
                    https_port=443,
                    origin_ssl_protocols=["TLSv1.2"],
                ),
            )
        ]

        # Read-only default behavior; nothing is forwarded so every viewer
        # shares one cache entry per path.
        forwarded_values = aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
            query_string=False,
            cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(
                forward="none",
            ),
        )
        default_cache_behavior = aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
            target_origin_id=ORIGIN_ID,
            viewer_protocol_policy="redirect-to-https",
            allowed_methods=["GET", "HEAD", "OPTIONS"],
            cached_methods=["GET", "HEAD", "OPTIONS"],
            forwarded_values=forwarded_values,
            min_ttl=0,
            default_ttl=cache_ttl,
            max_ttl=cache_ttl,
        )

        custom_error_responses = [
            aws.cloudfront.DistributionCustomErrorResponseArgs(
                error_code=404,
                response_code=404,
                response_page_path=error_page_path(error_document),
            )
        ]

        restrictions = aws.cloudfront.DistributionRestrictionsArgs(
            geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                restriction_type="none",
            ),
        )

        # Use the validated ARN so the distribution is only created once the
        # certificate has been issued.
        viewer_certificate = aws.cloudfront.DistributionViewerCertificateArgs(
            acm_certificate_arn=self.certificate_validation.certificate_arn,
            ssl_support_method="sni-only",
        )

        logging_config = aws.cloudfront.DistributionLoggingConfigArgs(
            bucket=self.logs_bucket.bucket_domain_name,
            include_cookies=False,
            prefix=log_prefix(domain_name),
        )

        self.distribution = aws.cloudfront.Distribution(
            resource_name=f"{name}-cdn",
            enabled=True,
            aliases=[domain_name],
            origins=origins,
            default_root_object=index_document,
            default_cache_behavior=default_cache_behavior,
            price_class=price_class,
            custom_error_responses=custom_error_responses,
            restrictions=restrictions,
            viewer_certificate=viewer_certificate,
            logging_config=logging_config,
            opts=child_opts,
        )

        # Point the apex at the distribution.
        self.alias_record = aws.route53.Record(
            resource_name=f"{name}-apex-record",
            zone_id=self.zone.zone_id,
            name=domain_name,
            type=aws.route53.RecordType.A,
            aliases=[
                aws.route53.RecordAliasArgs(
                    name=self.distribution.domain_name,
                    zone_id=self.distribution.hosted_zone_id,
                    evaluate_target_health=True,
                )
            ],
            opts=child_opts,
        )

        self.bucket_name: pulumi.Output[str] = self.bucket.bucket
        self.website_endpoint: pulumi.Output[str] = self.bucket.website_endpoint
        self.cdn_domain_name: pulumi.Output[str] = self.distribution.domain_name
        self.cdn_url: pulumi.Output[str] = pulumi.Output.concat(
            "https://", self.distribution.domain_name
        )
        self.site_url: str = site_url(domain_name)
        self.name_servers: pulumi.Output[list[str]] = self.zone.name_servers
        self.register_outputs(
            {
                "bucket_name": self.bucket_name,
                "website_endpoint": self.website_endpoint,
                "cdn_domain_name": self.cdn_domain_name,
                "cdn_url": self.cdn_url,
                "site_url": self.site_url,
                "name_servers": self.name_servers,
            }
        )
