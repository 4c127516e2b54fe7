"""
IAM trust roles for cross-service access.

Creates:
- Bedrock knowledge-base role: reads source documents from the bucket and
  writes embeddings into Aurora through the Data API
- Bedrock agent role: invokes the configured foundation models, queries
  knowledge bases and reads prompts
- GitHub Actions role: assumed by CI through the account's OIDC provider
  to push images, deploy the frontend, invalidate CloudFront and read
  /code-refactor configuration

The Bedrock roles are declared before compute (the API container receives
their ARNs). The CI role is declared after the frontend because its
policies are scoped to the frontend bucket and the distribution.
"""

import json
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import (
    CI_ROLE_NAME,
    CONFIG_PREFIX,
    GITHUB_OIDC_HOST,
    RDS_DATA_ACTIONS,
)
from IAC.utils.policies import assume_role_policy, policy_document, statement
from IAC.utils.tags import create_tags

ECR_PUSH_ACTIONS = [
    "ecr:GetAuthorizationToken",
    "ecr:BatchCheckLayerAvailability",
    "ecr:GetDownloadUrlForLayer",
    "ecr:BatchGetImage",
    "ecr:InitiateLayerUpload",
    "ecr:UploadLayerPart",
    "ecr:CompleteLayerUpload",
    "ecr:PutImage",
]


@dataclass
class BedrockRoleOutputs:
    """Output values from Bedrock roles component."""
    knowledge_base_role_arn: pulumi.Output[str]
    agent_role_arn: pulumi.Output[str]


@dataclass
class CiRoleOutputs:
    """Output values from CI deployment role component."""
    role_arn: pulumi.Output[str]
    role_name: pulumi.Output[str]


def github_trust_policy(account_id: str, repositories: tuple[str, ...]) -> str:
    """
    Web-identity trust policy for GitHub Actions OIDC tokens.

    Args:
        account_id: Account holding the OIDC provider
        repositories: "owner/repo" names allowed to assume the role

    Returns:
        JSON trust policy
    """
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {
                "Federated": f"arn:aws:iam::{account_id}:oidc-provider/{GITHUB_OIDC_HOST}",
            },
            "Action": "sts:AssumeRoleWithWebIdentity",
            "Condition": {
                "StringEquals": {f"{GITHUB_OIDC_HOST}:aud": "sts.amazonaws.com"},
                "StringLike": {
                    f"{GITHUB_OIDC_HOST}:sub": [f"repo:{repo}:*" for repo in repositories],
                },
            },
        }],
    })


class BedrockRolesComponent(pulumi.ComponentResource):
    """
    Service roles assumed by Amazon Bedrock.
    """

    def __init__(
        self,
        name: str,
        config: EnvironmentConfig,
        bucket_arn: pulumi.Input[str],
        secret_arn: pulumi.Input[str],
        cluster_arn: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:security:BedrockRoles", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        environment = config.environment
        bedrock_trust = assume_role_policy("bedrock.amazonaws.com")

        self.knowledge_base_role = aws.iam.Role(
            f"{name}-bedrock-kb-role",
            assume_role_policy=bedrock_trust,
            description="Bedrock knowledge base access to S3 and Aurora",
            tags=create_tags(environment, f"{name}-bedrock-kb-role"),
            opts=child_opts,
        )

        aws.iam.RolePolicy(
            f"{name}-bedrock-kb-policy",
            role=self.knowledge_base_role.id,
            policy=pulumi.Output.json_dumps(policy_document(
                statement(
                    ["s3:GetObject", "s3:ListBucket"],
                    [bucket_arn, pulumi.Output.concat(bucket_arn, "/*")],
                ),
                statement(["secretsmanager:GetSecretValue"], secret_arn),
                statement(RDS_DATA_ACTIONS, cluster_arn),
                statement(["rds:DescribeDBClusters", "rds:DescribeDBInstances"], "*"),
            )),
            opts=child_opts,
        )

        self.agent_role = aws.iam.Role(
            f"{name}-bedrock-agent-role",
            assume_role_policy=bedrock_trust,
            description="Bedrock agent model invocation and knowledge base retrieval",
            tags=create_tags(environment, f"{name}-bedrock-agent-role"),
            opts=child_opts,
        )

        model_arns = [
            f"arn:aws:bedrock:{config.region}::foundation-model/{model}"
            for model in config.foundation_models
        ]
        aws.iam.RolePolicy(
            f"{name}-bedrock-agent-policy",
            role=self.agent_role.id,
            policy=json.dumps(policy_document(
                statement(["bedrock:InvokeModel"], model_arns),
                statement(
                    ["bedrock:Retrieve", "bedrock:RetrieveAndGenerate"],
                    config.arn("bedrock", "knowledge-base/*"),
                ),
                statement(["bedrock:GetPrompt"], config.arn("bedrock", "prompt/*")),
            )),
            opts=child_opts,
        )

        self.register_outputs({
            "knowledge_base_role_arn": self.knowledge_base_role.arn,
            "agent_role_arn": self.agent_role.arn,
        })

    def get_outputs(self) -> BedrockRoleOutputs:
        """Get Bedrock role output values."""
        return BedrockRoleOutputs(
            knowledge_base_role_arn=self.knowledge_base_role.arn,
            agent_role_arn=self.agent_role.arn,
        )


class CiDeploymentRoleComponent(pulumi.ComponentResource):
    """
    Role assumed by GitHub Actions workflows of the trusted repositories.
    """

    def __init__(
        self,
        name: str,
        config: EnvironmentConfig,
        frontend_bucket_arn: pulumi.Input[str],
        distribution_id: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:security:CiDeploymentRole", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.role = aws.iam.Role(
            f"{name}-github-actions-role",
            name=CI_ROLE_NAME,
            assume_role_policy=github_trust_policy(config.account_id, config.ci_repositories),
            description="GitHub Actions deployment role",
            tags=create_tags(config.environment, CI_ROLE_NAME),
            opts=child_opts,
        )

        distribution_arn = pulumi.Output.concat(
            config.arn("cloudfront", "distribution/", region=False), distribution_id,
        )
        inline_policies = {
            "ecr-push": policy_document(statement(ECR_PUSH_ACTIONS, "*")),
            "frontend-deploy": policy_document(statement(
                [
                    "s3:GetObject",
                    "s3:PutObject",
                    "s3:DeleteObject",
                    "s3:ListBucket",
                    "s3:GetBucketLocation",
                ],
                [frontend_bucket_arn, pulumi.Output.concat(frontend_bucket_arn, "/*")],
            )),
            "cloudfront-invalidation": policy_document(statement(
                ["cloudfront:CreateInvalidation", "cloudfront:GetInvalidation"],
                distribution_arn,
            )),
            "ssm-read": policy_document(statement(
                ["ssm:GetParameter", "ssm:GetParameters", "ssm:GetParametersByPath"],
                config.arn("ssm", f"parameter{CONFIG_PREFIX}/*"),
            )),
            "secrets-read": policy_document(statement(
                ["secretsmanager:GetSecretValue", "secretsmanager:DescribeSecret"],
                config.arn("secretsmanager", f"secret:{CONFIG_PREFIX}/*"),
            )),
        }
        for policy_name, document in inline_policies.items():
            aws.iam.RolePolicy(
                f"{name}-github-actions-{policy_name}",
                role=self.role.id,
                policy=pulumi.Output.json_dumps(document),
                opts=child_opts,
            )

        self.register_outputs({
            "role_arn": self.role.arn,
        })

    def get_outputs(self) -> CiRoleOutputs:
        """Get CI role output values."""
        return CiRoleOutputs(
            role_arn=self.role.arn,
            role_name=self.role.name,
        )
