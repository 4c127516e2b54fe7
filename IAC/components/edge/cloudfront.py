"""
CloudFront CDN Component for the Frontend SPA.

Key Components:
1. Frontend bucket (code-refactor-frontend-{account}-{region}):
   private, public access blocked, force-destroyed with the stack.
2. Origin Access Identity + bucket policy: CloudFront is the only principal
   allowed to read objects. Direct S3 URLs are denied.
3. Distribution:
   - Single S3 origin, viewer traffic redirected to HTTPS.
   - GET/HEAD only, compressed, index.html as the root object.
   - IPv6 enabled, PriceClass_100 (North America and Europe edges).

"SPA fallback" (custom error responses):
   - React handles routing in the browser, so /projects/42 is not an object.
   - S3 answers 403 (OAI without ListBucket) or 404 for such paths.
   - Both are rewritten to 200 /index.html, cached at the edge for 300s.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.components.storage.s3_buckets import private_bucket
from IAC.configs.constants import CLOUDFRONT_PRICE_CLASS, SPA_ERROR_CACHING_TTL_SECONDS
from IAC.utils.tags import create_tags

S3_ORIGIN_ID = "s3-frontend"


@dataclass
class CloudFrontOutputs:
    """Output values from CloudFront component."""
    bucket_name: pulumi.Output[str]
    bucket_arn: pulumi.Output[str]
    distribution_id: pulumi.Output[str]
    distribution_domain: pulumi.Output[str]


class CloudFrontComponent(pulumi.ComponentResource):
    """
    Private frontend bucket served through a CloudFront distribution.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        bucket_name: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:edge:CloudFront", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.bucket = private_bucket(
            f"{name}-frontend",
            bucket_name,
            environment,
            child_opts,
        )

        self.oai = aws.cloudfront.OriginAccessIdentity(
            f"{name}-oai",
            comment=f"OAI for {name} frontend",
            opts=child_opts,
        )

        self.distribution = aws.cloudfront.Distribution(
            f"{name}-distribution",
            comment=f"{name} frontend",
            enabled=True,
            is_ipv6_enabled=True,
            default_root_object="index.html",
            price_class=CLOUDFRONT_PRICE_CLASS,
            origins=[
                aws.cloudfront.DistributionOriginArgs(
                    domain_name=self.bucket.bucket_regional_domain_name,
                    origin_id=S3_ORIGIN_ID,
                    s3_origin_config=aws.cloudfront.DistributionOriginS3OriginConfigArgs(
                        origin_access_identity=self.oai.cloudfront_access_identity_path,
                    ),
                ),
            ],
            default_cache_behavior=aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
                target_origin_id=S3_ORIGIN_ID,
                viewer_protocol_policy="redirect-to-https",
                allowed_methods=["GET", "HEAD"],
                cached_methods=["GET", "HEAD"],
                forwarded_values=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
                    query_string=False,
                    cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(
                        forward="none",
                    ),
                ),
                min_ttl=0,
                default_ttl=86400,
                max_ttl=31536000,
                compress=True,
            ),
            custom_error_responses=[
                aws.cloudfront.DistributionCustomErrorResponseArgs(
                    error_code=error_code,
                    response_code=200,
                    response_page_path="/index.html",
                    error_caching_min_ttl=SPA_ERROR_CACHING_TTL_SECONDS,
                )
                for error_code in (403, 404)
            ],
            restrictions=aws.cloudfront.DistributionRestrictionsArgs(
                geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                    restriction_type="none",
                ),
            ),
            viewer_certificate=aws.cloudfront.DistributionViewerCertificateArgs(
                cloudfront_default_certificate=True,
            ),
            tags=create_tags(environment, f"{name}-distribution"),
            opts=child_opts,
        )

        self.bucket_policy = aws.s3.BucketPolicy(
            f"{name}-frontend-policy",
            bucket=self.bucket.id,
            policy=pulumi.Output.json_dumps({
                "Version": "2012-10-17",
                "Statement": [{
                    "Effect": "Allow",
                    "Principal": {"AWS": self.oai.iam_arn},
                    "Action": "s3:GetObject",
                    "Resource": pulumi.Output.concat(self.bucket.arn, "/*"),
                }],
            }),
            opts=child_opts,
        )

        self.register_outputs({
            "bucket_name": self.bucket.bucket,
            "distribution_id": self.distribution.id,
            "distribution_domain": self.distribution.domain_name,
        })

    def get_outputs(self) -> CloudFrontOutputs:
        """Get CloudFront output values."""
        return CloudFrontOutputs(
            bucket_name=self.bucket.bucket,
            bucket_arn=self.bucket.arn,
            distribution_id=self.distribution.id,
            distribution_domain=self.distribution.domain_name,
        )
