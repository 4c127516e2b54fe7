"""
VPC Component Resource for Network Infrastructure.

Steps & Architecture:
1. VPC (10.0.0.0/16): The isolated network container.
2. Internet Gateway (IGW): The only path in or out of the VPC.
3. Public subnets, one /24 per availability zone (two by default):
   - ALB, ECS tasks (public IP), Aurora and the migration Lambda all live here.
   - At least two AZs are mandatory: Aurora subnet groups and ALBs both
     refuse single-AZ placement.
4. Public route table: 0.0.0.0/0 -> IGW, associated with every subnet.

Known limitation:
- There is no NAT gateway. Lambda ENIs never receive public IPs, so the
  migration function reaches AWS APIs through interface endpoints
  (see vpc_endpoints.py) rather than the internet.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import PUBLIC_SUBNET_CIDRS, VPC_CIDR
from IAC.utils.tags import create_tags


@dataclass
class VpcOutputs:
    """Output values from VPC component."""
    vpc_id: pulumi.Output[str]
    public_subnet_ids: list[pulumi.Output[str]]
    public_route_table_id: pulumi.Output[str]


class VpcComponent(pulumi.ComponentResource):
    """
    VPC component with one public subnet per availability zone.

    No NAT egress: every subnet routes straight to the internet gateway.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        availability_zones: tuple[str, ...],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:Vpc", name, None, opts)
        self.environment = environment

        child_opts = pulumi.ResourceOptions(parent=self)

        self.vpc = aws.ec2.Vpc(
            f"{name}-vpc",
            cidr_block=VPC_CIDR,
            enable_dns_hostnames=True,
            enable_dns_support=True,
            tags=create_tags(environment, f"{name}-vpc"),
            opts=child_opts,
        )

        self.igw = aws.ec2.InternetGateway(
            f"{name}-igw",
            vpc_id=self.vpc.id,
            tags=create_tags(environment, f"{name}-igw"),
            opts=child_opts,
        )

        self.public_subnets: list[aws.ec2.Subnet] = []
        for index, zone in enumerate(availability_zones):
            subnet_name = f"{name}-public-subnet-{index + 1}"
            self.public_subnets.append(aws.ec2.Subnet(
                subnet_name,
                vpc_id=self.vpc.id,
                cidr_block=PUBLIC_SUBNET_CIDRS[index],
                availability_zone=zone,
                map_public_ip_on_launch=True,
                tags=create_tags(environment, subnet_name, tier="public"),
                opts=child_opts,
            ))

        self._create_route_table(name, child_opts)

        self.register_outputs({
            "vpc_id": self.vpc.id,
            "public_subnet_ids": [subnet.id for subnet in self.public_subnets],
            "public_route_table_id": self.public_rt.id,
        })

    def _create_route_table(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create the public route table and associate every subnet."""
        self.public_rt = aws.ec2.RouteTable(
            f"{name}-public-rt",
            vpc_id=self.vpc.id,
            routes=[
                aws.ec2.RouteTableRouteArgs(
                    cidr_block="0.0.0.0/0",
                    gateway_id=self.igw.id,
                ),
            ],
            tags=create_tags(self.environment, f"{name}-public-rt"),
            opts=opts,
        )

        for index, subnet in enumerate(self.public_subnets):
            aws.ec2.RouteTableAssociation(
                f"{name}-public-rt-assoc-{index + 1}",
                subnet_id=subnet.id,
                route_table_id=self.public_rt.id,
                opts=opts,
            )

    def get_outputs(self) -> VpcOutputs:
        """Get VPC output values."""
        return VpcOutputs(
            vpc_id=self.vpc.id,
            public_subnet_ids=[subnet.id for subnet in self.public_subnets],
            public_route_table_id=self.public_rt.id,
        )
