"""
S3 Buckets Component for the Knowledge-Base Source Bucket.

Two buckets exist in the stack, both built by private_bucket():
1. Knowledge-base bucket (this component): source documents that Bedrock
   Knowledge Bases ingest.
   - Access: Bedrock KB role via IAM (s3:GetObject / s3:ListBucket).
   - Features: Versioning, SSE-S3 encryption, PublicAccessBlock.
2. Frontend bucket (edge/cloudfront.py): static SPA assets.
   - Access: CloudFront ONLY via Origin Access Identity.

Both are force-destroyed with the stack: objects are deleted on teardown
so `pulumi destroy` never fails on a non-empty bucket.

Bucket names embed account and region, e.g.
code-refactor-bucket-123456789012-us-east-1.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.utils.tags import create_tags


@dataclass
class S3BucketOutputs:
    """Output values from S3 buckets component."""
    bucket_name: pulumi.Output[str]
    bucket_arn: pulumi.Output[str]


def private_bucket(
    resource_name: str,
    bucket_name: str,
    environment: str,
    opts: pulumi.ResourceOptions,
    versioned: bool = False,
) -> aws.s3.Bucket:
    """
    Create a bucket with all public access blocked and SSE-S3 encryption.

    Args:
        resource_name: Pulumi logical name
        bucket_name: Globally unique physical bucket name
        environment: Deployment environment for tags
        opts: Resource options (parent)
        versioned: Enable object versioning

    Returns:
        The bucket resource
    """
    bucket = aws.s3.Bucket(
        resource_name,
        bucket=bucket_name,
        force_destroy=True,
        tags=create_tags(environment, bucket_name),
        opts=opts,
    )

    if versioned:
        aws.s3.BucketVersioning(
            f"{resource_name}-versioning",
            bucket=bucket.id,
            versioning_configuration=aws.s3.BucketVersioningVersioningConfigurationArgs(
                status="Enabled",
            ),
            opts=opts,
        )

    aws.s3.BucketServerSideEncryptionConfiguration(
        f"{resource_name}-encryption",
        bucket=bucket.id,
        rules=[aws.s3.BucketServerSideEncryptionConfigurationRuleArgs(
            apply_server_side_encryption_by_default=aws.s3.BucketServerSideEncryptionConfigurationRuleApplyServerSideEncryptionByDefaultArgs(
                sse_algorithm="AES256",
            ),
        )],
        opts=opts,
    )

    aws.s3.BucketPublicAccessBlock(
        f"{resource_name}-public-block",
        bucket=bucket.id,
        block_public_acls=True,
        block_public_policy=True,
        ignore_public_acls=True,
        restrict_public_buckets=True,
        opts=opts,
    )

    return bucket


class S3BucketsComponent(pulumi.ComponentResource):
    """
    Versioned, private S3 bucket feeding the Bedrock knowledge base.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        bucket_name: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:storage:S3Buckets", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.bucket = private_bucket(
            f"{name}-bucket",
            bucket_name,
            environment,
            child_opts,
            versioned=True,
        )

        self.register_outputs({
            "bucket_name": self.bucket.bucket,
            "bucket_arn": self.bucket.arn,
        })

    def get_outputs(self) -> S3BucketOutputs:
        """Get S3 bucket output values."""
        return S3BucketOutputs(
            bucket_name=self.bucket.bucket,
            bucket_arn=self.bucket.arn,
        )
