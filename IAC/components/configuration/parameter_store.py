"""
Configuration publisher: SSM Parameter Store and Secrets Manager.

Runs last. Every value it writes comes from a handle declared earlier in the
same pass.

Layout:
   Parameter Store (String, Standard tier), one parameter per record:
      /code-refactor/backend/<key>
      /code-refactor/frontend/<key>
      /code-refactor/deployment/<key>
   Secrets Manager, one JSON object per consumer:
      /code-refactor/backend/secrets   {"rds_credentials_secret_arn": ..., ...}
      /code-refactor/frontend/secrets  {"cognito_client_id": ...}

Records flagged secret=True only ever land in Secrets Manager; all other
records only ever land in Parameter Store. Encryption at rest is the
stores' own (SSM default key, Secrets Manager aws/secretsmanager key).
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import CONFIG_CONSUMERS
from IAC.utils.naming import ResourceNamer
from IAC.utils.tags import create_tags


@dataclass(frozen=True)
class ConfigurationRecord:
    """
    A name/value pair surfaced to a downstream consumer.

    Attributes:
        consumer: 'backend', 'frontend' or 'deployment'
        key: Parameter key, or field name inside the consumer's secret
        value: Resolved (or resolving) value
        secret: Store in Secrets Manager instead of Parameter Store
    """
    consumer: str
    key: str
    value: pulumi.Input[str]
    secret: bool = False


@dataclass
class ConfigurationOutputs:
    """Output values from the configuration publisher."""
    parameter_names: list[str]
    secret_names: list[str]


def partition_records(
    records: list[ConfigurationRecord],
) -> tuple[list[ConfigurationRecord], dict[str, list[ConfigurationRecord]]]:
    """
    Split records into plain parameters and per-consumer secret groups.

    Raises:
        ValueError: On an unknown consumer or a (consumer, key) declared twice
    """
    seen: set[tuple[str, str]] = set()
    parameters: list[ConfigurationRecord] = []
    secrets: dict[str, list[ConfigurationRecord]] = {}

    for record in records:
        if record.consumer not in CONFIG_CONSUMERS:
            raise ValueError(f"Unknown configuration consumer: {record.consumer}")
        identity = (record.consumer, record.key)
        if identity in seen:
            raise ValueError(f"Duplicate configuration record: {record.consumer}/{record.key}")
        seen.add(identity)

        if record.secret:
            secrets.setdefault(record.consumer, []).append(record)
        else:
            parameters.append(record)

    return parameters, secrets


class ParameterStoreComponent(pulumi.ComponentResource):
    """
    Publishes configuration records to Parameter Store and Secrets Manager.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        namer: ResourceNamer,
        records: list[ConfigurationRecord],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:configuration:ParameterStore", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        parameter_records, secret_groups = partition_records(records)

        self.parameters: dict[str, aws.ssm.Parameter] = {}
        for record in parameter_records:
            parameter_name = namer.parameter_name(record.consumer, record.key)
            self.parameters[parameter_name] = aws.ssm.Parameter(
                namer.parameter_resource_name(parameter_name),
                name=parameter_name,
                type="String",
                tier="Standard",
                value=record.value,
                description=f"Configuration parameter for {parameter_name}",
                tags=create_tags(environment, parameter_name),
                opts=child_opts,
            )

        self.secrets: dict[str, aws.secretsmanager.Secret] = {}
        for consumer, group in secret_groups.items():
            secret_name = namer.secret_name(consumer)
            secret = aws.secretsmanager.Secret(
                f"{name}-{consumer}-secrets",
                name=secret_name,
                description=f"Secret configuration for {consumer}",
                recovery_window_in_days=0,
                tags=create_tags(environment, secret_name),
                opts=child_opts,
            )
            aws.secretsmanager.SecretVersion(
                f"{name}-{consumer}-secrets-version",
                secret_id=secret.id,
                secret_string=pulumi.Output.json_dumps({
                    record.key: record.value for record in group
                }),
                opts=child_opts,
            )
            self.secrets[secret_name] = secret

        pulumi.log.info(
            f"Publishing {len(self.parameters)} parameters and {len(self.secrets)} secrets",
            resource=self,
        )

        self.register_outputs({
            "parameter_names": list(self.parameters),
            "secret_names": list(self.secrets),
        })

    def get_outputs(self) -> ConfigurationOutputs:
        """Get configuration publisher output values."""
        return ConfigurationOutputs(
            parameter_names=list(self.parameters),
            secret_names=list(self.secrets),
        )
