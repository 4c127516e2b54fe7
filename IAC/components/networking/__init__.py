"""
Networking components for VPC infrastructure.

Components:
- VpcComponent: VPC with one public subnet per AZ, IGW, route table
- SecurityGroupsComponent: Security groups for ALB, ECS, database, migration Lambda, endpoints
- VpcEndpointsComponent: Secrets Manager and RDS Data interface endpoints
"""

from IAC.components.networking.vpc import VpcComponent, VpcOutputs
from IAC.components.networking.security_groups import SecurityGroupsComponent, SecurityGroupOutputs
from IAC.components.networking.vpc_endpoints import VpcEndpointsComponent, VpcEndpointOutputs

__all__ = [
    "VpcComponent",
    "VpcOutputs",
    "SecurityGroupsComponent",
    "SecurityGroupOutputs",
    "VpcEndpointsComponent",
    "VpcEndpointOutputs",
]
