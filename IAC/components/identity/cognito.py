"""
Cognito Component for User Authentication.

Resources:
1. User Pool: the user directory.
   - Self sign-up, sign-in by username or email.
   - Email addresses are auto-verified; account recovery by verified email only.
   - Password policy: min 8 characters with lower, upper, digit and symbol.
2. User Pool Client: the SPA / API client.
   - No client secret (public browser client).
   - Auth flows: USER_PASSWORD, USER_SRP, ADMIN_USER_PASSWORD (used by
     setup_auth), REFRESH_TOKEN.
   - OAuth: authorization code + implicit grants, scopes email/openid/profile.
   - Token lifetimes: ID / access 24h, refresh 30 days.
3. User Pool Domain: hosted login UI at
   https://{prefix}.auth.{region}.amazoncognito.com, prefix code-refactor-{account}.

API Gateway's JWT authorizer trusts tokens whose issuer is this pool and
whose audience is this client.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import (
    ACCESS_TOKEN_VALIDITY_HOURS,
    ID_TOKEN_VALIDITY_HOURS,
    OAUTH_SCOPES,
    PASSWORD_MIN_LENGTH,
    REFRESH_TOKEN_VALIDITY_DAYS,
)
from IAC.utils.tags import create_tags

# Users sign in by username or by this verified alias
SIGN_IN_ALIASES = ["email"]

EXPLICIT_AUTH_FLOWS = [
    "ALLOW_USER_PASSWORD_AUTH",
    "ALLOW_USER_SRP_AUTH",
    "ALLOW_ADMIN_USER_PASSWORD_AUTH",
    "ALLOW_REFRESH_TOKEN_AUTH",
]


def hosted_ui_url(domain_prefix: str, region: str) -> str:
    """Hosted UI base URL for a Cognito domain prefix."""
    return f"https://{domain_prefix}.auth.{region}.amazoncognito.com"


def issuer_url(user_pool_id: pulumi.Input[str], region: str) -> pulumi.Output[str]:
    """OIDC issuer URL of a user pool, as JWT authorizers expect it."""
    return pulumi.Output.concat("https://cognito-idp.", region, ".amazonaws.com/", user_pool_id)


@dataclass
class CognitoOutputs:
    """Output values from Cognito component."""
    user_pool_id: pulumi.Output[str]
    user_pool_arn: pulumi.Output[str]
    client_id: pulumi.Output[str]
    domain: pulumi.Output[str]
    hosted_ui_url: str
    issuer: pulumi.Output[str]


class CognitoComponent(pulumi.ComponentResource):
    """
    Cognito user pool, app client and hosted domain.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        region: str,
        domain_prefix: str,
        callback_urls: tuple[str, ...],
        logout_urls: tuple[str, ...],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:identity:Cognito", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        self.region = region
        self.domain_prefix = domain_prefix

        self.user_pool = aws.cognito.UserPool(
            f"{name}-user-pool",
            name=f"{name}-user-pool",
            alias_attributes=SIGN_IN_ALIASES,
            auto_verified_attributes=["email"],
            admin_create_user_config=aws.cognito.UserPoolAdminCreateUserConfigArgs(
                allow_admin_create_user_only=False,
            ),
            password_policy=aws.cognito.UserPoolPasswordPolicyArgs(
                minimum_length=PASSWORD_MIN_LENGTH,
                require_lowercase=True,
                require_uppercase=True,
                require_numbers=True,
                require_symbols=True,
            ),
            account_recovery_setting=aws.cognito.UserPoolAccountRecoverySettingArgs(
                recovery_mechanisms=[
                    aws.cognito.UserPoolAccountRecoverySettingRecoveryMechanismArgs(
                        name="verified_email",
                        priority=1,
                    ),
                ],
            ),
            tags=create_tags(environment, f"{name}-user-pool"),
            opts=child_opts,
        )

        self.client = aws.cognito.UserPoolClient(
            f"{name}-client",
            name=f"{name}-client",
            user_pool_id=self.user_pool.id,
            generate_secret=False,
            explicit_auth_flows=EXPLICIT_AUTH_FLOWS,
            allowed_oauth_flows_user_pool_client=True,
            allowed_oauth_flows=["code", "implicit"],
            allowed_oauth_scopes=list(OAUTH_SCOPES),
            callback_urls=list(callback_urls),
            logout_urls=list(logout_urls),
            supported_identity_providers=["COGNITO"],
            id_token_validity=ID_TOKEN_VALIDITY_HOURS,
            access_token_validity=ACCESS_TOKEN_VALIDITY_HOURS,
            refresh_token_validity=REFRESH_TOKEN_VALIDITY_DAYS,
            token_validity_units=aws.cognito.UserPoolClientTokenValidityUnitsArgs(
                id_token="hours",
                access_token="hours",
                refresh_token="days",
            ),
            prevent_user_existence_errors="ENABLED",
            opts=child_opts,
        )

        self.domain = aws.cognito.UserPoolDomain(
            f"{name}-domain",
            domain=domain_prefix,
            user_pool_id=self.user_pool.id,
            opts=child_opts,
        )

        self.register_outputs({
            "user_pool_id": self.user_pool.id,
            "client_id": self.client.id,
            "domain": self.domain.domain,
            "hosted_ui_url": hosted_ui_url(domain_prefix, region),
        })

    def get_outputs(self) -> CognitoOutputs:
        """Get Cognito output values."""
        return CognitoOutputs(
            user_pool_id=self.user_pool.id,
            user_pool_arn=self.user_pool.arn,
            client_id=self.client.id,
            domain=self.domain.domain,
            hosted_ui_url=hosted_ui_url(self.domain_prefix, self.region),
            issuer=issuer_url(self.user_pool.id, self.region),
        )
