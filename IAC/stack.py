"""
Stack composition for Code Refactor infrastructure.

Instantiates all component resources in dependency order, leaf-first:
1. Networking: VPC → Security Groups → VPC Endpoints
2. Storage & Database: knowledge-base bucket, credential secret → Aurora → migration Lambda
3. Identity: Cognito user pool, client, hosted domain
4. Trust roles: Bedrock knowledge-base and agent roles
5. Compute: ECR repository, ECS cluster and task definition
6. Edge: ALB → ECS service → API Gateway
7. Frontend: bucket + CloudFront
8. CI role (scoped to the frontend bucket and distribution)
9. Configuration: Parameter Store and Secrets Manager records

Each step only consumes outputs of earlier steps.
"""

from dataclasses import dataclass
from pathlib import Path

import pulumi

from IAC.components.compute.alb import AlbComponent
from IAC.components.compute.ecs_service import (
    EcsClusterComponent,
    EcsServiceComponent,
    build_container_environment,
)
from IAC.components.compute.schema_lambda import SchemaLambdaComponent
from IAC.components.configuration.parameter_store import ParameterStoreComponent
from IAC.components.configuration.records import build_configuration_records
from IAC.components.edge.api_gateway import ApiGatewayComponent
from IAC.components.edge.cloudfront import CloudFrontComponent
from IAC.components.identity.cognito import CognitoComponent
from IAC.components.networking.security_groups import SecurityGroupsComponent
from IAC.components.networking.vpc import VpcComponent
from IAC.components.networking.vpc_endpoints import VpcEndpointsComponent
from IAC.components.security.iam_roles import BedrockRolesComponent, CiDeploymentRoleComponent
from IAC.components.security.secrets_manager import DatabaseCredentialsComponent
from IAC.components.storage.ecr_repository import EcrRepositoryComponent
from IAC.components.storage.rds_postgres import RdsPostgresComponent
from IAC.components.storage.s3_buckets import S3BucketsComponent
from IAC.configs.base import EnvironmentConfig
from IAC.configs.constants import ECR_REPOSITORY_NAME, PROJECT_NAME
from IAC.utils.naming import ResourceNamer


PROJECT_ROOT = Path(__file__).parent.parent


def _resolve_package_dir(package_dir: str) -> Path:
    """Relative package dirs are taken from the project root, not the cwd."""
    path = Path(package_dir)
    return path if path.is_absolute() else PROJECT_ROOT / path


@dataclass
class StackResources:
    """Top-level components plus the exported outputs."""
    components: dict[str, pulumi.ComponentResource]
    outputs: dict[str, pulumi.Input[str]]


def build_stack(
    config: EnvironmentConfig,
    lambda_code: pulumi.Archive | None = None,
) -> StackResources:
    """
    Declare every resource of the stack.

    Args:
        config: Read-only stack context
        lambda_code: Migration Lambda archive; defaults to a FileArchive
            of config.lambda_package_dir

    Returns:
        StackResources with components keyed by layer and the stack outputs
    """
    namer = ResourceNamer(project=PROJECT_NAME, environment=config.environment)
    base_name = namer.name("")
    environment = config.environment

    # --- Layer 1: Networking Foundation ---
    vpc = VpcComponent(
        name=base_name,
        environment=environment,
        availability_zones=config.availability_zones,
    )
    vpc_outputs = vpc.get_outputs()

    security_groups = SecurityGroupsComponent(
        name=base_name,
        environment=environment,
        vpc_id=vpc_outputs.vpc_id,
    )
    sg_outputs = security_groups.get_outputs()

    components: dict[str, pulumi.ComponentResource] = {
        "vpc": vpc,
        "security_groups": security_groups,
    }

    if config.enable_vpc_endpoints:
        components["vpc_endpoints"] = VpcEndpointsComponent(
            name=base_name,
            environment=environment,
            region=config.region,
            vpc_id=vpc_outputs.vpc_id,
            subnet_ids=vpc_outputs.public_subnet_ids,
            security_group_id=sg_outputs.endpoints_sg_id,
        )

    # --- Layer 2: Storage & Database ---
    storage = S3BucketsComponent(
        name=base_name,
        environment=environment,
        bucket_name=namer.bucket_name("bucket", config.account_id, config.region),
    )
    storage_outputs = storage.get_outputs()

    credentials = DatabaseCredentialsComponent(
        name=base_name,
        environment=environment,
        secret_name=namer.name("db-secret"),
    )
    credentials_outputs = credentials.get_outputs()

    database = RdsPostgresComponent(
        name=base_name,
        environment=environment,
        config=config,
        cluster_identifier=namer.name("cluster"),
        subnet_ids=vpc_outputs.public_subnet_ids,
        security_group_id=sg_outputs.database_sg_id,
        master_username=credentials_outputs.username,
        master_password=credentials_outputs.password,
        credentials=credentials.secret_version,
    )
    db_outputs = database.get_outputs()

    schema_lambda = SchemaLambdaComponent(
        name=namer.name("schema-migration"),
        environment=environment,
        code=lambda_code or pulumi.FileArchive(str(_resolve_package_dir(config.lambda_package_dir))),
        subnet_ids=vpc_outputs.public_subnet_ids,
        security_group_id=sg_outputs.migration_sg_id,
        secret_arn=credentials_outputs.secret_arn,
        cluster_arn=db_outputs.cluster_arn,
        database_name=db_outputs.database_name,
        database_host=db_outputs.endpoint,
    )
    lambda_outputs = schema_lambda.get_outputs()

    # --- Layer 3: Identity ---
    cognito = CognitoComponent(
        name=base_name,
        environment=environment,
        region=config.region,
        domain_prefix=namer.domain_prefix(config.account_id),
        callback_urls=config.callback_urls,
        logout_urls=config.logout_urls,
    )
    cognito_outputs = cognito.get_outputs()

    # --- Layer 4: Trust Roles ---
    bedrock_roles = BedrockRolesComponent(
        name=base_name,
        config=config,
        bucket_arn=storage_outputs.bucket_arn,
        secret_arn=credentials_outputs.secret_arn,
        cluster_arn=db_outputs.cluster_arn,
    )
    bedrock_outputs = bedrock_roles.get_outputs()

    # --- Layer 5: Compute ---
    ecr_repository = EcrRepositoryComponent(
        name=base_name,
        environment=environment,
        repository_name=ECR_REPOSITORY_NAME,
    )
    ecr_outputs = ecr_repository.get_outputs()

    ecs_cluster = EcsClusterComponent(
        name=base_name,
        config=config,
        image_uri=pulumi.Output.concat(ecr_outputs.repository_url, ":latest"),
        secret_arn=credentials_outputs.secret_arn,
        environment_variables=build_container_environment(
            region=config.region,
            secret_arn=credentials_outputs.secret_arn,
            cluster_arn=db_outputs.cluster_arn,
            database_name=db_outputs.database_name,
            schema_lambda_arn=lambda_outputs.function_arn,
            knowledge_base_role_arn=bedrock_outputs.knowledge_base_role_arn,
            agent_role_arn=bedrock_outputs.agent_role_arn,
            bucket_name=storage_outputs.bucket_name,
            user_pool_id=cognito_outputs.user_pool_id,
            client_id=cognito_outputs.client_id,
        ),
    )
    ecs_outputs = ecs_cluster.get_outputs()

    # --- Layer 6: Edge ---
    alb = AlbComponent(
        name=base_name,
        environment=environment,
        vpc_id=vpc_outputs.vpc_id,
        subnet_ids=vpc_outputs.public_subnet_ids,
        security_group_id=sg_outputs.alb_sg_id,
    )
    alb_outputs = alb.get_outputs()

    ecs_service = EcsServiceComponent(
        name=base_name,
        environment=environment,
        cluster_arn=ecs_outputs.cluster_arn,
        task_definition_arn=ecs_outputs.task_definition_arn,
        subnet_ids=vpc_outputs.public_subnet_ids,
        security_group_id=sg_outputs.ecs_sg_id,
        target_group_arn=alb_outputs.target_group_arn,
        listener=alb.listener,
        desired_count=config.desired_count,
    )

    api_gateway = ApiGatewayComponent(
        name=base_name,
        environment=environment,
        alb_dns_name=alb_outputs.alb_dns_name,
        user_pool_client_id=cognito_outputs.client_id,
        issuer=cognito_outputs.issuer,
    )
    api_outputs = api_gateway.get_outputs()

    # --- Layer 7: Frontend ---
    frontend = CloudFrontComponent(
        name=base_name,
        environment=environment,
        bucket_name=namer.bucket_name("frontend", config.account_id, config.region),
    )
    frontend_outputs = frontend.get_outputs()

    # --- Layer 8: CI Role ---
    ci_role = CiDeploymentRoleComponent(
        name=base_name,
        config=config,
        frontend_bucket_arn=frontend_outputs.bucket_arn,
        distribution_id=frontend_outputs.distribution_id,
    )
    ci_outputs = ci_role.get_outputs()

    # --- Layer 9: Configuration ---
    configuration = ParameterStoreComponent(
        name=base_name,
        environment=environment,
        namer=namer,
        records=build_configuration_records(
            region=config.region,
            account_id=config.account_id,
            api_url=api_outputs.api_endpoint,
            user_pool_id=cognito_outputs.user_pool_id,
            client_id=cognito_outputs.client_id,
            hosted_ui_url=cognito_outputs.hosted_ui_url,
            bucket_name=storage_outputs.bucket_name,
            cluster_arn=db_outputs.cluster_arn,
            credentials_secret_arn=credentials_outputs.secret_arn,
            ecr_repository_uri=ecr_outputs.repository_url,
            ecs_cluster_name=ecs_outputs.cluster_name,
            schema_lambda_arn=lambda_outputs.function_arn,
            knowledge_base_role_arn=bedrock_outputs.knowledge_base_role_arn,
            agent_role_arn=bedrock_outputs.agent_role_arn,
            frontend_bucket_name=frontend_outputs.bucket_name,
            distribution_id=frontend_outputs.distribution_id,
            distribution_domain=frontend_outputs.distribution_domain,
        ),
    )

    components.update({
        "storage": storage,
        "credentials": credentials,
        "database": database,
        "schema_lambda": schema_lambda,
        "cognito": cognito,
        "bedrock_roles": bedrock_roles,
        "ecr_repository": ecr_repository,
        "ecs_cluster": ecs_cluster,
        "alb": alb,
        "ecs_service": ecs_service,
        "api_gateway": api_gateway,
        "frontend": frontend,
        "ci_role": ci_role,
        "configuration": configuration,
    })

    outputs: dict[str, pulumi.Input[str]] = {
        "vpc_id": vpc_outputs.vpc_id,
        "bucket_name": storage_outputs.bucket_name,
        "rds_cluster_arn": db_outputs.cluster_arn,
        "rds_credentials_secret_arn": credentials_outputs.secret_arn,
        "schema_lambda_arn": lambda_outputs.function_arn,
        "cognito_user_pool_id": cognito_outputs.user_pool_id,
        "cognito_user_pool_client_id": cognito_outputs.client_id,
        "cognito_hosted_ui_url": cognito_outputs.hosted_ui_url,
        "bedrock_knowledge_base_role_arn": bedrock_outputs.knowledge_base_role_arn,
        "bedrock_agent_role_arn": bedrock_outputs.agent_role_arn,
        "ecr_repository_uri": ecr_outputs.repository_url,
        "ecs_cluster_name": ecs_outputs.cluster_name,
        "alb_dns_name": alb_outputs.alb_dns_name,
        "api_gateway_url": api_outputs.api_endpoint,
        "frontend_bucket_name": frontend_outputs.bucket_name,
        "cloudfront_distribution_id": frontend_outputs.distribution_id,
        "cloudfront_distribution_domain_name": frontend_outputs.distribution_domain,
        "github_actions_role_arn": ci_outputs.role_arn,
    }

    return StackResources(components=components, outputs=outputs)
