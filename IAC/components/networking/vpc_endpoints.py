"""
VPC Endpoints Component for Private AWS Service Access.

The VPC has no NAT gateway, and Lambda ENIs never get public IPs, so the
in-VPC schema-migration function cannot reach AWS APIs over the internet.
Interface endpoints place ENIs with private IPs inside the public subnets;
private_dns_enabled makes the regular service hostnames resolve to them.

Endpoints created:
   - secretsmanager: read the database credential secret.
   - rds-data: execute statements through the Aurora Data API.

Interface endpoints are billed hourly. Set enable_vpc_endpoints=false in
stack config to skip them when the migration function is not needed.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.utils.tags import create_tags

INTERFACE_SERVICES = ("secretsmanager", "rds-data")


@dataclass
class VpcEndpointOutputs:
    """Output values from VPC endpoints component."""
    endpoint_ids: dict[str, pulumi.Output[str]]


class VpcEndpointsComponent(pulumi.ComponentResource):
    """Interface endpoints for the services the migration Lambda calls."""

    def __init__(
        self,
        name: str,
        environment: str,
        region: str,
        vpc_id: pulumi.Input[str],
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:VpcEndpoints", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.endpoints: dict[str, aws.ec2.VpcEndpoint] = {}
        for service in INTERFACE_SERVICES:
            self.endpoints[service] = aws.ec2.VpcEndpoint(
                f"{name}-{service}-endpoint",
                vpc_id=vpc_id,
                service_name=f"com.amazonaws.{region}.{service}",
                vpc_endpoint_type="Interface",
                subnet_ids=subnet_ids,
                security_group_ids=[security_group_id],
                private_dns_enabled=True,
                tags=create_tags(environment, f"{name}-{service}-endpoint"),
                opts=child_opts,
            )

        self.register_outputs({
            f"{service}_endpoint_id": endpoint.id
            for service, endpoint in self.endpoints.items()
        })

    def get_outputs(self) -> VpcEndpointOutputs:
        """Get VPC endpoint output values."""
        return VpcEndpointOutputs(
            endpoint_ids={service: endpoint.id for service, endpoint in self.endpoints.items()},
        )
