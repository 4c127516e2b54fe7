"""
Configuration records published at the end of the stack.

Backend and frontend consumers read these at startup; CI reads the
deployment records. Role ARNs, the credential secret ARN and the Cognito
client ID are classified secret.
"""

import pulumi

from IAC.components.configuration.parameter_store import ConfigurationRecord


def _https(domain: pulumi.Input[str]) -> pulumi.Input[str]:
    if isinstance(domain, str):
        return f"https://{domain}"
    return pulumi.Output.concat("https://", domain)


def build_configuration_records(
    *,
    region: str,
    account_id: str,
    api_url: pulumi.Input[str],
    user_pool_id: pulumi.Input[str],
    client_id: pulumi.Input[str],
    hosted_ui_url: pulumi.Input[str],
    bucket_name: pulumi.Input[str],
    cluster_arn: pulumi.Input[str],
    credentials_secret_arn: pulumi.Input[str],
    ecr_repository_uri: pulumi.Input[str],
    ecs_cluster_name: pulumi.Input[str],
    schema_lambda_arn: pulumi.Input[str],
    knowledge_base_role_arn: pulumi.Input[str],
    agent_role_arn: pulumi.Input[str],
    frontend_bucket_name: pulumi.Input[str],
    distribution_id: pulumi.Input[str],
    distribution_domain: pulumi.Input[str],
) -> list[ConfigurationRecord]:
    """
    Build every backend, frontend and deployment record.

    Returns:
        Records in publication order
    """
    backend = [
        ("api-gateway-url", api_url),
        ("cognito-user-pool-id", user_pool_id),
        ("cognito-region", region),
        ("s3-bucket-name", bucket_name),
        ("rds-cluster-arn", cluster_arn),
        ("aws-region", region),
        ("aws-account-id", account_id),
        ("ecr-repository-uri", ecr_repository_uri),
        ("ecs-cluster-name", ecs_cluster_name),
        ("rds-postgres-schema-ensure-lambda-arn", schema_lambda_arn),
    ]
    frontend = [
        ("api-base-url", api_url),
        ("cognito-user-pool-id", user_pool_id),
        ("cognito-hosted-ui-url", hosted_ui_url),
        ("aws-region", region),
        ("cloudfront-domain", _https(distribution_domain)),
    ]
    deployment = [
        ("frontend-bucket", frontend_bucket_name),
        ("cloudfront-distribution-id", distribution_id),
        ("ecr-repository-uri", ecr_repository_uri),
        ("aws-region", region),
    ]
    backend_secrets = [
        ("rds_credentials_secret_arn", credentials_secret_arn),
        ("bedrock_knowledge_base_role_arn", knowledge_base_role_arn),
        ("bedrock_agent_role_arn", agent_role_arn),
        ("cognito_client_id", client_id),
    ]
    frontend_secrets = [
        ("cognito_client_id", client_id),
    ]

    records: list[ConfigurationRecord] = []
    for consumer, entries, secret in (
        ("backend", backend, False),
        ("frontend", frontend, False),
        ("deployment", deployment, False),
        ("backend", backend_secrets, True),
        ("frontend", frontend_secrets, True),
    ):
        records.extend(
            ConfigurationRecord(consumer=consumer, key=key, value=value, secret=secret)
            for key, value in entries
        )
    return records
