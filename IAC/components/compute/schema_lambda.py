"""
Schema migration Lambda component.

Creates:
- IAM role: basic execution + VPC access managed policies, plus an inline
  policy limited to reading the credential secret and running Data API
  statements against this one cluster
- CloudWatch log group for function logs
- Lambda function (zip from the packaged backend) attached to the VPC

The function ensures the pgvector schema Bedrock Knowledge Bases expects.
The API container receives its ARN and invokes it on demand; reserved
concurrency 1 keeps two migrations from racing.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import (
    PORTS,
    RDS_DATA_ACTIONS,
    SCHEMA_LAMBDA_ARCHITECTURE,
    SCHEMA_LAMBDA_DEFAULTS,
    SCHEMA_LAMBDA_HANDLER,
    SCHEMA_LAMBDA_RUNTIME,
)
from IAC.utils.policies import assume_role_policy, policy_document, statement
from IAC.utils.tags import create_tags


@dataclass
class SchemaLambdaOutputs:
    """Output values from schema migration Lambda component."""
    function_arn: pulumi.Output[str]
    function_name: pulumi.Output[str]
    role_arn: pulumi.Output[str]


def migration_policy(secret_arn: pulumi.Input[str], cluster_arn: pulumi.Input[str]) -> pulumi.Output[str]:
    """Inline policy: read one secret, run statements on one cluster."""
    return pulumi.Output.json_dumps(policy_document(
        statement(
            ["secretsmanager:GetSecretValue", "secretsmanager:DescribeSecret"],
            secret_arn,
        ),
        statement(RDS_DATA_ACTIONS, cluster_arn),
    ))


class SchemaLambdaComponent(pulumi.ComponentResource):
    """
    Lambda function that creates the knowledge-base vector schema.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        code: pulumi.Archive,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        secret_arn: pulumi.Input[str],
        cluster_arn: pulumi.Input[str],
        database_name: pulumi.Input[str],
        database_host: pulumi.Input[str],
        log_level: str = "INFO",
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:SchemaLambda", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.role = aws.iam.Role(
            f"{name}-role",
            assume_role_policy=assume_role_policy("lambda.amazonaws.com"),
            tags=create_tags(environment, f"{name}-role"),
            opts=child_opts,
        )

        for suffix, policy_arn in (
            ("basic-execution", "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"),
            ("vpc-access", "arn:aws:iam::aws:policy/service-role/AWSLambdaVPCAccessExecutionRole"),
        ):
            aws.iam.RolePolicyAttachment(
                f"{name}-{suffix}",
                role=self.role.name,
                policy_arn=policy_arn,
                opts=child_opts,
            )

        self.policy = aws.iam.RolePolicy(
            f"{name}-policy",
            role=self.role.id,
            policy=migration_policy(secret_arn, cluster_arn),
            opts=child_opts,
        )

        self.log_group = aws.cloudwatch.LogGroup(
            f"{name}-logs",
            name=f"/aws/lambda/{name}",
            retention_in_days=14,
            tags=create_tags(environment, f"{name}-logs"),
            opts=child_opts,
        )

        self.function = aws.lambda_.Function(
            f"{name}-function",
            name=name,
            role=self.role.arn,
            runtime=SCHEMA_LAMBDA_RUNTIME,
            architectures=[SCHEMA_LAMBDA_ARCHITECTURE],
            handler=SCHEMA_LAMBDA_HANDLER,
            code=code,
            memory_size=SCHEMA_LAMBDA_DEFAULTS["memory_mb"],
            timeout=SCHEMA_LAMBDA_DEFAULTS["timeout_seconds"],
            reserved_concurrent_executions=SCHEMA_LAMBDA_DEFAULTS["reserved_concurrency"],
            vpc_config=aws.lambda_.FunctionVpcConfigArgs(
                subnet_ids=subnet_ids,
                security_group_ids=[security_group_id],
            ),
            environment=aws.lambda_.FunctionEnvironmentArgs(
                variables={
                    "DB_SECRET_ARN": secret_arn,
                    "DB_CLUSTER_ARN": cluster_arn,
                    "DB_NAME": database_name,
                    "DB_HOST": database_host,
                    "DB_PORT": str(PORTS["postgres"]),
                    "EMBEDDING_DIMENSIONS": str(SCHEMA_LAMBDA_DEFAULTS["embedding_dimensions"]),
                    "AUTO_MIGRATE_SCHEMA": "true",
                    "LOG_LEVEL": log_level,
                },
            ),
            tags=create_tags(environment, f"{name}-function"),
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[self.log_group, self.policy],
            ),
        )

        self.register_outputs({
            "function_arn": self.function.arn,
            "function_name": self.function.name,
            "role_arn": self.role.arn,
        })

    def get_outputs(self) -> SchemaLambdaOutputs:
        """Get Lambda output values."""
        return SchemaLambdaOutputs(
            function_arn=self.function.arn,
            function_name=self.function.name,
            role_arn=self.role.arn,
        )
