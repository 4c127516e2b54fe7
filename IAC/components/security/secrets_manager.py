"""
Secrets Manager component for the database master credentials.

Creates:
- code-refactor-db-secret: JSON {"username": "postgres", "password": ...}

The password is generated by Secrets Manager itself (GetRandomPassword)
and kept as a Pulumi secret Output. It must exist before the Aurora
cluster, which reads the same value as its master password; both the
secret version and the cluster ignore later changes so a redeploy never
rotates the credential underneath a running database.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import (
    DB_MASTER_USERNAME,
    DB_PASSWORD_EXCLUDED_CHARACTERS,
    DB_PASSWORD_LENGTH,
)
from IAC.utils.tags import create_tags


@dataclass
class DatabaseCredentialsOutputs:
    """Output values from database credentials component."""
    secret_arn: pulumi.Output[str]
    username: str
    password: pulumi.Output[str]


class DatabaseCredentialsComponent(pulumi.ComponentResource):
    """
    Database credential secret with a generated password.

    recovery_window_in_days=0 deletes the secret immediately on destroy,
    so the fixed name can be reused by the next deploy.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        secret_name: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:security:DatabaseCredentials", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        generated = aws.secretsmanager.get_random_password_output(
            password_length=DB_PASSWORD_LENGTH,
            exclude_characters=DB_PASSWORD_EXCLUDED_CHARACTERS,
            opts=pulumi.InvokeOptions(parent=self),
        )
        self.password = pulumi.Output.secret(generated.random_password)

        self.secret = aws.secretsmanager.Secret(
            f"{name}-db-secret",
            name=secret_name,
            description="Aurora PostgreSQL master credentials",
            recovery_window_in_days=0,
            tags=create_tags(environment, secret_name),
            opts=child_opts,
        )

        self.secret_version = aws.secretsmanager.SecretVersion(
            f"{name}-db-secret-version",
            secret_id=self.secret.id,
            secret_string=pulumi.Output.json_dumps({
                "username": DB_MASTER_USERNAME,
                "password": self.password,
            }),
            opts=pulumi.ResourceOptions(parent=self, ignore_changes=["secret_string"]),
        )

        self.register_outputs({
            "secret_arn": self.secret.arn,
        })

    def get_outputs(self) -> DatabaseCredentialsOutputs:
        """Get database credential output values."""
        return DatabaseCredentialsOutputs(
            secret_arn=self.secret.arn,
            username=DB_MASTER_USERNAME,
            password=self.password,
        )
