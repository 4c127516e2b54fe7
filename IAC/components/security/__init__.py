"""
Security components for IAM and secrets management.

Components:
- DatabaseCredentialsComponent: Aurora master credential secret
- BedrockRolesComponent: Bedrock knowledge-base and agent service roles
- CiDeploymentRoleComponent: GitHub Actions OIDC deployment role
"""

from IAC.components.security.iam_roles import (
    BedrockRoleOutputs,
    BedrockRolesComponent,
    CiDeploymentRoleComponent,
    CiRoleOutputs,
)
from IAC.components.security.secrets_manager import (
    DatabaseCredentialsComponent,
    DatabaseCredentialsOutputs,
)

__all__ = [
    "BedrockRoleOutputs",
    "BedrockRolesComponent",
    "CiDeploymentRoleComponent",
    "CiRoleOutputs",
    "DatabaseCredentialsComponent",
    "DatabaseCredentialsOutputs",
]
