"""
Compute components for ECS, ALB and Lambda.

Components:
- EcsClusterComponent: ECS cluster, roles and Fargate task definition
- EcsServiceComponent: Fargate service attached to the ALB
- AlbComponent: Internet-facing ALB, target group and listener
- SchemaLambdaComponent: pgvector schema migration function
"""

from IAC.components.compute.alb import AlbComponent, AlbOutputs
from IAC.components.compute.ecs_service import (
    CONTAINER_ENVIRONMENT_KEYS,
    EcsClusterComponent,
    EcsClusterOutputs,
    EcsServiceComponent,
    EcsServiceOutputs,
    build_container_environment,
)
from IAC.components.compute.schema_lambda import SchemaLambdaComponent, SchemaLambdaOutputs

__all__ = [
    "AlbComponent",
    "AlbOutputs",
    "CONTAINER_ENVIRONMENT_KEYS",
    "EcsClusterComponent",
    "EcsClusterOutputs",
    "EcsServiceComponent",
    "EcsServiceOutputs",
    "build_container_environment",
    "SchemaLambdaComponent",
    "SchemaLambdaOutputs",
]
