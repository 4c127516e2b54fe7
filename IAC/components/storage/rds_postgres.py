"""
Aurora PostgreSQL Serverless v2 Component for the Vector Store.

Access Control - Who Can Connect:
1. ECS service (ecs_sg) → Port 5432 ✅
2. Schema migration Lambda (migration_sg) → Port 5432 ✅
3. Data API callers (IAM: rds-data:*) → HTTPS, no network path needed ✅
4. Anyone else → DENIED ❌

How it is wired:
1. Placement: public subnets (the VPC has no private tier) but
   publicly_accessible=False, so no public endpoint is ever assigned.
2. Capacity: Serverless v2, 0.5 to 4 ACU. The cluster may pause when idle;
   Data API callers must retry DatabaseResumingException.
3. Credentials: master password comes from the credential secret, which is
   declared before this component (explicit depends_on).
4. Data API: enable_http_endpoint=True lets Bedrock Knowledge Bases and the
   migration Lambda run SQL over HTTPS with the secret ARN.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import (
    DB_ENGINE,
    DB_ENGINE_VERSION,
    DB_MAX_CAPACITY,
    DB_MIN_CAPACITY,
    DB_NAME,
    PORTS,
)
from IAC.configs.base import EnvironmentConfig
from IAC.utils.tags import create_tags


@dataclass
class RdsOutputs:
    """Output values from Aurora component."""
    cluster_arn: pulumi.Output[str]
    cluster_identifier: pulumi.Output[str]
    endpoint: pulumi.Output[str]
    port: pulumi.Output[int]
    database_name: pulumi.Output[str]


class RdsPostgresComponent(pulumi.ComponentResource):
    """
    Aurora PostgreSQL cluster with one Serverless v2 writer.

    Stores Bedrock knowledge-base embeddings (pgvector).
    """

    def __init__(
        self,
        name: str,
        environment: str,
        config: EnvironmentConfig,
        cluster_identifier: str,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        master_username: str,
        master_password: pulumi.Input[str],
        credentials: pulumi.Resource,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:storage:RdsPostgres", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.subnet_group = aws.rds.SubnetGroup(
            f"{name}-subnet-group",
            subnet_ids=subnet_ids,
            tags=create_tags(environment, f"{name}-subnet-group"),
            opts=child_opts,
        )

        self.cluster = aws.rds.Cluster(
            f"{name}-cluster",
            cluster_identifier=cluster_identifier,
            engine=DB_ENGINE,
            engine_mode="provisioned",
            engine_version=DB_ENGINE_VERSION,
            database_name=DB_NAME,
            master_username=master_username,
            master_password=master_password,
            port=PORTS["postgres"],
            db_subnet_group_name=self.subnet_group.name,
            vpc_security_group_ids=[security_group_id],
            enable_http_endpoint=True,
            storage_encrypted=True,
            serverlessv2_scaling_configuration=aws.rds.ClusterServerlessv2ScalingConfigurationArgs(
                min_capacity=DB_MIN_CAPACITY,
                max_capacity=DB_MAX_CAPACITY,
            ),
            deletion_protection=config.is_production,
            skip_final_snapshot=not config.is_production,
            final_snapshot_identifier=f"{cluster_identifier}-final" if config.is_production else None,
            backup_retention_period=7 if config.is_production else 1,
            tags=create_tags(environment, cluster_identifier),
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[credentials],
                ignore_changes=["master_password"],
            ),
        )

        self.writer = aws.rds.ClusterInstance(
            f"{name}-writer",
            cluster_identifier=self.cluster.id,
            identifier=f"{cluster_identifier}-writer",
            instance_class="db.serverless",
            engine=DB_ENGINE,
            engine_version=self.cluster.engine_version,
            publicly_accessible=False,
            db_subnet_group_name=self.subnet_group.name,
            tags=create_tags(environment, f"{cluster_identifier}-writer"),
            opts=child_opts,
        )

        self.register_outputs({
            "cluster_arn": self.cluster.arn,
            "endpoint": self.cluster.endpoint,
            "port": self.cluster.port,
            "database_name": DB_NAME,
        })

    def get_outputs(self) -> RdsOutputs:
        """Get Aurora output values."""
        return RdsOutputs(
            cluster_arn=self.cluster.arn,
            cluster_identifier=self.cluster.cluster_identifier,
            endpoint=self.cluster.endpoint,
            port=self.cluster.port,
            database_name=pulumi.Output.from_input(DB_NAME),
        )
