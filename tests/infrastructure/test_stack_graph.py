"""
Graph-level tests for the full stack under Pulumi mocks.

Validates:
1. Every layer registers its resources
2. Resources only reference handles declared before them
3. Physical names are a pure function of the stack context
4. Stack outputs and layer toggles
"""

import json

import pytest

TEST_ACCOUNT_ID = "123456789012"
TEST_REGION = "us-east-1"

EXPECTED_OUTPUTS = {
    "vpc_id",
    "bucket_name",
    "rds_cluster_arn",
    "rds_credentials_secret_arn",
    "schema_lambda_arn",
    "cognito_user_pool_id",
    "cognito_user_pool_client_id",
    "cognito_hosted_ui_url",
    "bedrock_knowledge_base_role_arn",
    "bedrock_agent_role_arn",
    "ecr_repository_uri",
    "ecs_cluster_name",
    "alb_dns_name",
    "api_gateway_url",
    "frontend_bucket_name",
    "cloudfront_distribution_id",
    "cloudfront_distribution_domain_name",
    "github_actions_role_arn",
}


def _strings(value):
    """Yield every string nested in a resource's inputs."""
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _strings(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _strings(item)


class TestStackComposition:
    """The stack registers every layer."""

    def test_every_layer_registers_resources(self, run_stack):
        """Each layer should contribute at least one AWS resource."""
        mocks, _ = run_stack()

        for fragment in (
            "ec2/vpc:Vpc",
            "s3/bucket:Bucket",
            "secretsmanager/secret:Secret",
            "rds/cluster:Cluster",
            "lambda/function:Function",
            "cognito/userPool:UserPool",
            "ecr/repository:Repository",
            "ecs/taskDefinition:TaskDefinition",
            "lb/loadBalancer:LoadBalancer",
            "ecs/service:Service",
            "apigatewayv2/api:Api",
            "cloudfront/distribution:Distribution",
            "ssm/parameter:Parameter",
        ):
            assert mocks.of_type(fragment), f"No resource of type {fragment}"

    def test_stack_exports_expected_outputs(self, run_stack):
        """build_stack should expose exactly the documented outputs."""
        _, stack = run_stack()

        assert set(stack.outputs) == EXPECTED_OUTPUTS

    def test_one_public_subnet_per_zone(self, run_stack):
        """Two availability zones should yield two public subnets."""
        mocks, _ = run_stack()

        subnets = mocks.of_type("ec2/subnet:Subnet")
        assert len(subnets) == 2
        assert {s.inputs["availabilityZone"] for s in subnets} == {"us-east-1a", "us-east-1b"}
        assert all(s.inputs["mapPublicIpOnLaunch"] for s in subnets)

    def test_user_pool_signs_in_by_username_or_email(self, run_stack):
        """The pool should use email as a sign-in alias, not as the username."""
        mocks, _ = run_stack()

        pool = mocks.by_name("code-refactor-user-pool").inputs
        assert pool["aliasAttributes"] == ["email"]
        assert "usernameAttributes" not in pool

    def test_no_nat_gateway(self, run_stack):
        """Public-only networking should not create NAT gateways."""
        mocks, _ = run_stack()

        assert not mocks.of_type("ec2/natGateway:NatGateway")

    def test_vpc_endpoints_follow_config_toggle(self, run_stack, test_config):
        """Interface endpoints should only exist when enabled."""
        from dataclasses import replace

        mocks, _ = run_stack()
        services = {e.inputs["serviceName"] for e in mocks.of_type("ec2/vpcEndpoint:VpcEndpoint")}
        assert services == {
            f"com.amazonaws.{TEST_REGION}.secretsmanager",
            f"com.amazonaws.{TEST_REGION}.rds-data",
        }

        mocks, stack = run_stack(replace(test_config, enable_vpc_endpoints=False))
        assert not mocks.of_type("ec2/vpcEndpoint:VpcEndpoint")
        assert "vpc_endpoints" not in stack.components


class TestDependencyOrder:
    """Resources only consume handles that already exist."""

    def test_no_forward_references(self, run_stack):
        """Every referenced id or ARN should belong to an earlier registration."""
        mocks, _ = run_stack()

        handles = {}
        for resource in mocks.resources:
            if resource.typ.startswith("custom:"):
                continue
            handles[resource.resource_id] = resource
            handles[f"arn:aws:mock:{TEST_REGION}:{TEST_ACCOUNT_ID}:{resource.name}"] = resource

        violations = []
        for resource in mocks.resources:
            for value in _strings(resource.inputs):
                referenced = handles.get(value)
                if referenced is not None and referenced.order >= resource.order:
                    violations.append(f"{resource.name} -> {referenced.name}")

        assert not violations, "Forward references:\n" + "\n".join(violations)

    def test_credential_secret_precedes_cluster(self, run_stack):
        """The master credential secret should exist before the cluster."""
        mocks, _ = run_stack()

        secret = mocks.by_name("code-refactor-db-secret")
        cluster = mocks.by_name("code-refactor-cluster")
        assert secret.order < cluster.order


class TestDeterministicNaming:
    """Rebuilding the stack yields the same names."""

    def test_two_runs_produce_identical_graphs(self, run_stack):
        """Type and logical name of every resource should match across runs."""
        first, _ = run_stack()
        second, _ = run_stack()

        def signature(mocks):
            return sorted((r.typ, r.name) for r in mocks.resources)

        assert signature(first) == signature(second)

    def test_physical_names(self, run_stack):
        """Fixed physical names should follow the code-refactor convention."""
        mocks, _ = run_stack()

        buckets = {b.inputs["bucket"] for b in mocks.of_type("s3/bucket:Bucket")}
        assert buckets == {
            f"code-refactor-bucket-{TEST_ACCOUNT_ID}-{TEST_REGION}",
            f"code-refactor-frontend-{TEST_ACCOUNT_ID}-{TEST_REGION}",
        }
        assert mocks.by_name("code-refactor-cluster").inputs["clusterIdentifier"] == "code-refactor-cluster"
        assert mocks.by_name("code-refactor-db-secret").inputs["name"] == "code-refactor-db-secret"
        assert mocks.by_name("code-refactor-user-pool").inputs["name"] == "code-refactor-user-pool"
        assert mocks.by_name("code-refactor-client").inputs["name"] == "code-refactor-client"
        assert mocks.by_name("code-refactor-domain").inputs["domain"] == f"code-refactor-{TEST_ACCOUNT_ID}"

    def test_every_aws_resource_carries_project_tag(self, run_stack):
        """Taggable resources should carry the project tag used by teardown tooling."""
        mocks, _ = run_stack()

        tagged = [r for r in mocks.resources if "tags" in r.inputs]
        assert tagged
        for resource in tagged:
            assert resource.inputs["tags"]["project"] == "CodeRefactoring", resource.name
            assert resource.inputs["tags"]["ManagedBy"] == "pulumi", resource.name


class TestDatabaseLayer:
    """Aurora cluster and the migration function."""

    def test_cluster_is_serverless_with_data_api(self, run_stack):
        """The cluster should be Serverless v2 with the Data API enabled."""
        mocks, _ = run_stack()

        cluster = mocks.by_name("code-refactor-cluster").inputs
        assert cluster["engine"] == "aurora-postgresql"
        assert cluster["enableHttpEndpoint"] is True
        assert cluster["serverlessv2ScalingConfiguration"] == {"minCapacity": 0.5, "maxCapacity": 4.0}

        writer = mocks.of_type("rds/clusterInstance:ClusterInstance")[0].inputs
        assert writer["instanceClass"] == "db.serverless"
        assert writer["publiclyAccessible"] is False

    def test_dev_cluster_is_disposable(self, run_stack):
        """Outside prod the cluster should tear down without a snapshot."""
        mocks, _ = run_stack()

        cluster = mocks.by_name("code-refactor-cluster").inputs
        assert cluster["deletionProtection"] is False
        assert cluster["skipFinalSnapshot"] is True
        assert cluster["backupRetentionPeriod"] == 1
        assert "finalSnapshotIdentifier" not in cluster

    def test_prod_cluster_is_protected(self, run_stack, test_config):
        """Prod should enable deletion protection, a final snapshot and 7-day backups."""
        from dataclasses import replace

        mocks, _ = run_stack(replace(test_config, environment="prod"))

        cluster = mocks.by_name("code-refactor-cluster").inputs
        assert cluster["deletionProtection"] is True
        assert cluster["skipFinalSnapshot"] is False
        assert cluster["backupRetentionPeriod"] == 7
        assert cluster["finalSnapshotIdentifier"] == "code-refactor-cluster-final"

    def test_migration_function_configuration(self, run_stack):
        """The migration Lambda should run alone in the VPC with its database settings."""
        mocks, _ = run_stack()

        function = mocks.of_type("lambda/function:Function")[0].inputs
        assert function["runtime"] == "python3.12"
        assert function["architectures"] == ["x86_64"]
        assert function["reservedConcurrentExecutions"] == 1
        assert function["vpcConfig"]["securityGroupIds"] == ["code-refactor-migration-sg_id"]

        variables = function["environment"]["variables"]
        assert variables["AUTO_MIGRATE_SCHEMA"] == "true"
        assert variables["EMBEDDING_DIMENSIONS"] == "1536"
        assert variables["DB_NAME"] == "coderefactor"
        assert set(variables) >= {"DB_SECRET_ARN", "DB_CLUSTER_ARN", "DB_HOST"}

    def test_migration_policy_is_scoped(self, run_stack):
        """The inline migration policy should name only the secret and the cluster."""
        mocks, _ = run_stack()

        policy = json.loads(mocks.by_name("code-refactor-schema-migration-policy").inputs["policy"])
        resources = [s["Resource"] for s in policy["Statement"]]
        assert resources == [
            f"arn:aws:mock:{TEST_REGION}:{TEST_ACCOUNT_ID}:code-refactor-db-secret",
            f"arn:aws:mock:{TEST_REGION}:{TEST_ACCOUNT_ID}:code-refactor-cluster",
        ]


class TestComputeLayer:
    """ECS task definition and service wiring."""

    def test_task_definition_environment_contract(self, run_stack):
        """The container should receive exactly the documented environment names."""
        from IAC.components.compute.ecs_service import CONTAINER_ENVIRONMENT_KEYS

        mocks, _ = run_stack()

        task = mocks.of_type("ecs/taskDefinition:TaskDefinition")[0].inputs
        container = json.loads(task["containerDefinitions"])[0]
        names = [entry["name"] for entry in container["environment"]]

        assert sorted(names) == sorted(CONTAINER_ENVIRONMENT_KEYS)
        assert container["portMappings"][0]["containerPort"] == 8080
        assert container["image"].endswith(":latest")
        assert task["cpu"] == "512"
        assert task["memory"] == "1024"

    def test_target_group_health_check(self, run_stack):
        """The target group should probe /health on the container port."""
        mocks, _ = run_stack()

        target_group = mocks.of_type("lb/targetGroup:TargetGroup")[0].inputs
        assert target_group["port"] == 8080
        assert target_group["targetType"] == "ip"
        assert target_group["healthCheck"]["path"] == "/health"
        assert target_group["healthCheck"]["matcher"] == "200"

    def test_frontend_distribution_spa_fallback(self, run_stack):
        """403 and 404 should serve index.html with status 200."""
        mocks, _ = run_stack()

        distribution = mocks.of_type("cloudfront/distribution:Distribution")[0].inputs
        responses = {r["errorCode"]: r for r in distribution["customErrorResponses"]}
        assert set(responses) == {403, 404}
        for response in responses.values():
            assert response["responseCode"] == 200
            assert response["responsePagePath"] == "/index.html"
            assert response["errorCachingMinTtl"] == 300
        assert distribution["defaultCacheBehavior"]["viewerProtocolPolicy"] == "redirect-to-https"


@pytest.mark.parametrize("zones", [("us-east-1a",), ()])
def test_config_rejects_fewer_than_two_zones(zones):
    """EnvironmentConfig should refuse a single-zone topology."""
    from IAC.configs.base import EnvironmentConfig

    with pytest.raises(ValueError, match="availability zones"):
        EnvironmentConfig(
            environment="dev",
            account_id=TEST_ACCOUNT_ID,
            region=TEST_REGION,
            availability_zones=zones,
        )
