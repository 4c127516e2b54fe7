"""
ECS Fargate components for the refactoring API.

Two components, declared at different points of the stack:

1. EcsClusterComponent (compute layer)
   - ECS cluster, CloudWatch log group /ecs/code-refactor
   - Task execution role (image pull, log delivery)
   - Task role (credential secret, /code-refactor secrets and parameters)
   - Fargate task definition: 512 CPU / 1024 MiB, image <ECR_URL>:latest,
     port 8080, awslogs stream prefix "refactor", environment contract below

2. EcsServiceComponent (edge layer, after the ALB)
   - Fargate service in the public subnets with a public IP (no NAT),
     registered in the ALB target group

Environment contract:
   CONTAINER_ENVIRONMENT_KEYS lists every variable the API container reads.
   build_container_environment() must produce exactly these names.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import (
    CONFIG_PREFIX,
    CONTAINER_DEFAULTS,
    CONTAINER_LOG_GROUP,
    CONTAINER_LOG_STREAM_PREFIX,
    CONTAINER_NAME,
    PORTS,
)
from IAC.utils.policies import assume_role_policy, policy_document, statement
from IAC.utils.tags import create_tags

CONTAINER_ENVIRONMENT_KEYS: tuple[str, ...] = (
    "AI_BEDROCK_RDS_POSTGRES_CREDENTIALS_SECRET_ARN",
    "AI_BEDROCK_RDS_POSTGRES_INSTANCE_ARN",
    "AI_BEDROCK_RDS_POSTGRES_DATABASE_NAME",
    "AI_BEDROCK_RDS_POSTGRES_SCHEMA_ENSURE_LAMBDA_ARN",
    "AI_BEDROCK_REGION",
    "AI_BEDROCK_KNOWLEDGE_BASE_SERVICE_ROLE_ARN",
    "AI_BEDROCK_AGENT_SERVICE_ROLE_ARN",
    "AI_BEDROCK_S3_BUCKET_NAME",
    "AI_DEFAULT_PROVIDER",
    "AI_LOCAL_ENABLED",
    "COGNITO_USER_POOL_ID",
    "COGNITO_CLIENT_ID",
    "COGNITO_REGION",
    "METRICS_NAMESPACE",
    "METRICS_REGION",
    "METRICS_SERVICE_NAME",
    "METRICS_ENABLED",
    "GIT_AUTHOR",
    "GIT_EMAIL",
    "GIT_TOKEN",
    "TIMEOUT_SECONDS",
    "LOG_LEVEL",
)


def build_container_environment(
    region: str,
    secret_arn: pulumi.Input[str],
    cluster_arn: pulumi.Input[str],
    database_name: pulumi.Input[str],
    schema_lambda_arn: pulumi.Input[str],
    knowledge_base_role_arn: pulumi.Input[str],
    agent_role_arn: pulumi.Input[str],
    bucket_name: pulumi.Input[str],
    user_pool_id: pulumi.Input[str],
    client_id: pulumi.Input[str],
) -> dict[str, pulumi.Input[str]]:
    """
    Build the API container's environment variables.

    Returns:
        Mapping from variable name to value, keyed by CONTAINER_ENVIRONMENT_KEYS
    """
    return {
        "AI_BEDROCK_RDS_POSTGRES_CREDENTIALS_SECRET_ARN": secret_arn,
        "AI_BEDROCK_RDS_POSTGRES_INSTANCE_ARN": cluster_arn,
        "AI_BEDROCK_RDS_POSTGRES_DATABASE_NAME": database_name,
        "AI_BEDROCK_RDS_POSTGRES_SCHEMA_ENSURE_LAMBDA_ARN": schema_lambda_arn,
        "AI_BEDROCK_REGION": region,
        "AI_BEDROCK_KNOWLEDGE_BASE_SERVICE_ROLE_ARN": knowledge_base_role_arn,
        "AI_BEDROCK_AGENT_SERVICE_ROLE_ARN": agent_role_arn,
        "AI_BEDROCK_S3_BUCKET_NAME": bucket_name,
        "AI_DEFAULT_PROVIDER": "bedrock",
        "AI_LOCAL_ENABLED": "false",
        "COGNITO_USER_POOL_ID": user_pool_id,
        "COGNITO_CLIENT_ID": client_id,
        "COGNITO_REGION": region,
        "METRICS_NAMESPACE": "CodeRefactorTool/API",
        "METRICS_REGION": region,
        "METRICS_SERVICE_NAME": "code-refactor-api",
        "METRICS_ENABLED": "true",
        "GIT_AUTHOR": "CodeRefactorBot",
        "GIT_EMAIL": "bot@code-refactor.example.com",
        # Overwritten by the operator after deploy
        "GIT_TOKEN": "placeholder-token",
        "TIMEOUT_SECONDS": "180",
        "LOG_LEVEL": "info",
    }


@dataclass
class EcsClusterOutputs:
    """Output values from ECS cluster component."""
    cluster_arn: pulumi.Output[str]
    cluster_name: pulumi.Output[str]
    task_definition_arn: pulumi.Output[str]
    task_role_arn: pulumi.Output[str]


@dataclass
class EcsServiceOutputs:
    """Output values from ECS service component."""
    service_name: pulumi.Output[str]


class EcsClusterComponent(pulumi.ComponentResource):
    """
    ECS cluster, IAM roles and Fargate task definition for the API.
    """

    def __init__(
        self,
        name: str,
        config: EnvironmentConfig,
        image_uri: pulumi.Input[str],
        secret_arn: pulumi.Input[str],
        environment_variables: dict[str, pulumi.Input[str]],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:EcsCluster", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        environment = config.environment

        self.cluster = aws.ecs.Cluster(
            f"{name}-ecs-cluster",
            name=f"{name}-ecs-cluster",
            tags=create_tags(environment, f"{name}-ecs-cluster"),
            opts=child_opts,
        )

        self.log_group = aws.cloudwatch.LogGroup(
            f"{name}-ecs-logs",
            name=CONTAINER_LOG_GROUP,
            retention_in_days=CONTAINER_DEFAULTS["log_retention_days"],
            tags=create_tags(environment, CONTAINER_LOG_GROUP),
            opts=child_opts,
        )

        ecs_trust = assume_role_policy("ecs-tasks.amazonaws.com")

        self.execution_role = aws.iam.Role(
            f"{name}-ecs-execution-role",
            assume_role_policy=ecs_trust,
            tags=create_tags(environment, f"{name}-ecs-execution-role"),
            opts=child_opts,
        )
        aws.iam.RolePolicyAttachment(
            f"{name}-ecs-execution-policy",
            role=self.execution_role.name,
            policy_arn="arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy",
            opts=child_opts,
        )

        self.task_role = aws.iam.Role(
            f"{name}-ecs-task-role",
            assume_role_policy=ecs_trust,
            tags=create_tags(environment, f"{name}-ecs-task-role"),
            opts=child_opts,
        )
        aws.iam.RolePolicy(
            f"{name}-ecs-task-policy",
            role=self.task_role.id,
            policy=pulumi.Output.json_dumps(policy_document(
                statement(
                    ["secretsmanager:GetSecretValue", "secretsmanager:DescribeSecret"],
                    [secret_arn, config.arn("secretsmanager", f"secret:{CONFIG_PREFIX}/*")],
                ),
                statement(
                    ["ssm:GetParameter", "ssm:GetParameters", "ssm:GetParametersByPath"],
                    config.arn("ssm", f"parameter{CONFIG_PREFIX}/*"),
                ),
            )),
            opts=child_opts,
        )

        container_definitions = pulumi.Output.json_dumps([{
            "name": CONTAINER_NAME,
            "image": image_uri,
            "essential": True,
            "portMappings": [{
                "containerPort": PORTS["container"],
                "protocol": "tcp",
            }],
            "environment": [
                {"name": key, "value": value}
                for key, value in environment_variables.items()
            ],
            "logConfiguration": {
                "logDriver": "awslogs",
                "options": {
                    "awslogs-group": self.log_group.name,
                    "awslogs-region": config.region,
                    "awslogs-stream-prefix": CONTAINER_LOG_STREAM_PREFIX,
                },
            },
        }])

        self.task_definition = aws.ecs.TaskDefinition(
            f"{name}-task",
            family=f"{name}-api",
            cpu=str(config.container_cpu),
            memory=str(config.container_memory),
            network_mode="awsvpc",
            requires_compatibilities=["FARGATE"],
            execution_role_arn=self.execution_role.arn,
            task_role_arn=self.task_role.arn,
            container_definitions=container_definitions,
            tags=create_tags(environment, f"{name}-task"),
            opts=child_opts,
        )

        self.register_outputs({
            "cluster_arn": self.cluster.arn,
            "cluster_name": self.cluster.name,
            "task_definition_arn": self.task_definition.arn,
        })

    def get_outputs(self) -> EcsClusterOutputs:
        """Get ECS cluster output values."""
        return EcsClusterOutputs(
            cluster_arn=self.cluster.arn,
            cluster_name=self.cluster.name,
            task_definition_arn=self.task_definition.arn,
            task_role_arn=self.task_role.arn,
        )


class EcsServiceComponent(pulumi.ComponentResource):
    """
    Fargate service registered behind the ALB target group.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        cluster_arn: pulumi.Input[str],
        task_definition_arn: pulumi.Input[str],
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        target_group_arn: pulumi.Input[str],
        listener: pulumi.Resource,
        desired_count: int = CONTAINER_DEFAULTS["desired_count"],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:EcsService", name, None, opts)

        self.service = aws.ecs.Service(
            f"{name}-service",
            name=f"{name}-service",
            cluster=cluster_arn,
            task_definition=task_definition_arn,
            desired_count=desired_count,
            launch_type="FARGATE",
            network_configuration=aws.ecs.ServiceNetworkConfigurationArgs(
                subnets=subnet_ids,
                security_groups=[security_group_id],
                assign_public_ip=True,
            ),
            load_balancers=[
                aws.ecs.ServiceLoadBalancerArgs(
                    target_group_arn=target_group_arn,
                    container_name=CONTAINER_NAME,
                    container_port=PORTS["container"],
                ),
            ],
            health_check_grace_period_seconds=60,
            tags=create_tags(environment, f"{name}-service"),
            opts=pulumi.ResourceOptions(parent=self, depends_on=[listener]),
        )

        self.register_outputs({
            "service_name": self.service.name,
        })

    def get_outputs(self) -> EcsServiceOutputs:
        """Get ECS service output values."""
        return EcsServiceOutputs(
            service_name=self.service.name,
        )
