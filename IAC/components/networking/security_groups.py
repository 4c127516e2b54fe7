"""
Security Groups Component for Network Access Control.

Architectural Steps & Flow:
1. Create "shell" security groups first (ALB, ECS service, database,
   migration Lambda, VPC endpoints) so they can be referenced by ID.
2. Attach rules as separate ingress/egress rule resources, referencing
   source security groups rather than CIDRs wherever possible.

Access patterns:
   - ALB: HTTP (80) from anywhere. API Gateway's HTTP proxy integration
     reaches it over the public internet.
   - ECS service: container port (8080) from the ALB only.
   - Database: PostgreSQL (5432) from the ECS service and the migration
     Lambda only.
   - VPC endpoints: HTTPS (443) from the migration Lambda.
   - Every group may send anything outbound.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import PORTS
from IAC.utils.tags import create_tags


@dataclass
class SecurityGroupOutputs:
    """Output values from security groups component."""
    alb_sg_id: pulumi.Output[str]
    ecs_sg_id: pulumi.Output[str]
    database_sg_id: pulumi.Output[str]
    migration_sg_id: pulumi.Output[str]
    endpoints_sg_id: pulumi.Output[str]


class SecurityGroupsComponent(pulumi.ComponentResource):
    """
    Security groups component for network access control.

    The database accepts connections only from the ECS service and the
    schema-migration Lambda.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:SecurityGroups", name, None, opts)
        self.environment = environment

        child_opts = pulumi.ResourceOptions(parent=self)

        self.alb_sg = self._security_group(
            name, "alb-sg", "Security group for Application Load Balancer", vpc_id, child_opts,
        )
        self.ecs_sg = self._security_group(
            name, "ecs-sg", "Security group for ECS Fargate service", vpc_id, child_opts,
        )
        self.database_sg = self._security_group(
            name, "database-sg", "Security group for Aurora PostgreSQL", vpc_id, child_opts,
        )
        self.migration_sg = self._security_group(
            name, "migration-sg", "Security group for schema migration Lambda", vpc_id, child_opts,
        )
        self.endpoints_sg = self._security_group(
            name, "endpoints-sg", "Security group for VPC endpoints", vpc_id, child_opts,
        )

        self._create_rules(name, child_opts)

        self.register_outputs({
            "alb_sg_id": self.alb_sg.id,
            "ecs_sg_id": self.ecs_sg.id,
            "database_sg_id": self.database_sg.id,
            "migration_sg_id": self.migration_sg.id,
            "endpoints_sg_id": self.endpoints_sg.id,
        })

    def _security_group(
        self,
        name: str,
        suffix: str,
        description: str,
        vpc_id: pulumi.Input[str],
        opts: pulumi.ResourceOptions,
    ) -> aws.ec2.SecurityGroup:
        return aws.ec2.SecurityGroup(
            f"{name}-{suffix}",
            description=description,
            vpc_id=vpc_id,
            tags=create_tags(self.environment, f"{name}-{suffix}"),
            opts=opts,
        )

    def _create_rules(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create security group rules."""
        # ALB: HTTP from the internet (API Gateway HTTP proxy)
        aws.vpc.SecurityGroupIngressRule(
            f"{name}-alb-ingress-http",
            security_group_id=self.alb_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["http"],
            to_port=PORTS["http"],
            cidr_ipv4="0.0.0.0/0",
            description="HTTP from API Gateway",
            opts=opts,
        )

        # ECS: container port from ALB
        aws.vpc.SecurityGroupIngressRule(
            f"{name}-ecs-ingress-alb",
            security_group_id=self.ecs_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["container"],
            to_port=PORTS["container"],
            referenced_security_group_id=self.alb_sg.id,
            description="Container port from ALB",
            opts=opts,
        )

        for source_name, source_sg in (("ecs", self.ecs_sg), ("migration", self.migration_sg)):
            aws.vpc.SecurityGroupIngressRule(
                f"{name}-database-ingress-{source_name}",
                security_group_id=self.database_sg.id,
                ip_protocol="tcp",
                from_port=PORTS["postgres"],
                to_port=PORTS["postgres"],
                referenced_security_group_id=source_sg.id,
                description=f"PostgreSQL from {source_name}",
                opts=opts,
            )

        aws.vpc.SecurityGroupIngressRule(
            f"{name}-endpoints-ingress-migration",
            security_group_id=self.endpoints_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["https"],
            to_port=PORTS["https"],
            referenced_security_group_id=self.migration_sg.id,
            description="HTTPS from migration Lambda",
            opts=opts,
        )

        for group_name, group in (
            ("alb", self.alb_sg),
            ("ecs", self.ecs_sg),
            ("database", self.database_sg),
            ("migration", self.migration_sg),
            ("endpoints", self.endpoints_sg),
        ):
            aws.vpc.SecurityGroupEgressRule(
                f"{name}-{group_name}-egress-all",
                security_group_id=group.id,
                ip_protocol="-1",
                cidr_ipv4="0.0.0.0/0",
                description="All outbound traffic",
                opts=opts,
            )

    def get_outputs(self) -> SecurityGroupOutputs:
        """Get security group output values."""
        return SecurityGroupOutputs(
            alb_sg_id=self.alb_sg.id,
            ecs_sg_id=self.ecs_sg.id,
            database_sg_id=self.database_sg.id,
            migration_sg_id=self.migration_sg.id,
            endpoints_sg_id=self.endpoints_sg.id,
        )
