"""
Storage components for S3, Aurora and ECR.

Components:
- S3BucketsComponent: Knowledge-base source bucket (private_bucket helper shared with the frontend)
- RdsPostgresComponent: Aurora PostgreSQL Serverless v2 cluster
- EcrRepositoryComponent: API container image repository
"""

from IAC.components.storage.s3_buckets import S3BucketsComponent, S3BucketOutputs, private_bucket
from IAC.components.storage.rds_postgres import RdsPostgresComponent, RdsOutputs
from IAC.components.storage.ecr_repository import EcrRepositoryComponent, EcrRepositoryOutputs

__all__ = [
    "S3BucketsComponent",
    "S3BucketOutputs",
    "private_bucket",
    "RdsPostgresComponent",
    "RdsOutputs",
    "EcrRepositoryComponent",
    "EcrRepositoryOutputs",
]
