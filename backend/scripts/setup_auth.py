"""
Cognito bootstrap and API smoke test.

Usage:
    python -m backend.scripts.setup_auth --stack dev --password '...'
    CODE_REFACTOR_ADMIN_PASSWORD='...' python -m backend.scripts.setup_auth

Purpose:
- Read user pool, client and API URL from the Pulumi stack outputs
- Create the default admin user (existing user is fine) with a permanent password
- Sign in with ADMIN_USER_PASSWORD_AUTH to obtain an ID token
- Call GET /health without and with the bearer token

Dependencies: boto3, httpx, python-dotenv, pulumi CLI
System role: Post-deploy verification of the JWT-guarded API
"""

import argparse
import json
import logging
import os
import subprocess
import sys
from typing import Any, Dict, List, Optional

import boto3
import httpx
from botocore.exceptions import ClientError
from dotenv import load_dotenv

from IAC.configs.constants import HEALTH_CHECK_PATH
from backend.observability.logger import configure_logging

# Load environment variables from .env if present
load_dotenv()

logger = logging.getLogger(__name__)

# The pool signs in by username or email alias, so usernames must not be email-shaped
DEFAULT_USERNAME = "admin"
DEFAULT_EMAIL = "admin@code-refactor.dev"
PASSWORD_ENV_VAR = "CODE_REFACTOR_ADMIN_PASSWORD"
REQUIRED_OUTPUTS = ("cognito_user_pool_id", "cognito_user_pool_client_id", "api_gateway_url")


class AuthSetupError(Exception):
    """Raised when the bootstrap cannot proceed."""

    pass


def get_stack_outputs(stack: str) -> Dict[str, Any]:
    """
    Read the Pulumi stack outputs.

    Raises:
        AuthSetupError: CLI missing, call failed or a required output is absent
    """
    try:
        result = subprocess.run(
            ["pulumi", "stack", "output", "--json", "--stack", stack],
            check=True,
            capture_output=True,
            text=True,
        )
        outputs = json.loads(result.stdout)
    except subprocess.CalledProcessError as e:
        raise AuthSetupError(f"Failed to retrieve Pulumi outputs: {e.stderr}") from e
    except json.JSONDecodeError as e:
        raise AuthSetupError("Failed to parse Pulumi outputs") from e
    except FileNotFoundError as e:
        raise AuthSetupError("Pulumi CLI not found. Install Pulumi and try again.") from e

    missing = [key for key in REQUIRED_OUTPUTS if not outputs.get(key)]
    if missing:
        raise AuthSetupError(f"Stack outputs missing: {', '.join(missing)}")
    return outputs


class CognitoBootstrap:
    """Creates the default user and signs in against one user pool."""

    def __init__(self, user_pool_id: str, client_id: str, region: Optional[str] = None, client: Any = None):
        self.user_pool_id = user_pool_id
        self.client_id = client_id
        self.client = client or boto3.client("cognito-idp", region_name=region)

    def ensure_user(self, username: str, password: str, email: str = DEFAULT_EMAIL) -> bool:
        """
        Create the user if needed and set a permanent password.

        Returns:
            bool: True if the user was created, False if it already existed
        """
        created = True
        try:
            self.client.admin_create_user(
                UserPoolId=self.user_pool_id,
                Username=username,
                UserAttributes=[
                    {"Name": "email", "Value": email},
                    {"Name": "email_verified", "Value": "true"},
                ],
                MessageAction="SUPPRESS",
            )
            logger.info(f"✓ Created user {username}")
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "UsernameExistsException":
                raise
            created = False
            logger.info(f"User {username} already exists")

        self.client.admin_set_user_password(
            UserPoolId=self.user_pool_id,
            Username=username,
            Password=password,
            Permanent=True,
        )
        return created

    def sign_in(self, username: str, password: str) -> str:
        """Return the ID token for username/password."""
        response = self.client.admin_initiate_auth(
            UserPoolId=self.user_pool_id,
            ClientId=self.client_id,
            AuthFlow="ADMIN_USER_PASSWORD_AUTH",
            AuthParameters={"USERNAME": username, "PASSWORD": password},
        )
        result = response.get("AuthenticationResult") or {}
        if "IdToken" not in result:
            raise AuthSetupError(
                f"Sign-in returned challenge {response.get('ChallengeName')!r} instead of tokens"
            )
        return result["IdToken"]


def smoke_test(api_url: str, id_token: str, http_client: Optional[httpx.Client] = None) -> Dict[str, int]:
    """
    Call the health route anonymously and with the bearer token.

    Returns:
        Status code per call, keyed 'anonymous' and 'authenticated'
    """
    url = api_url.rstrip("/") + HEALTH_CHECK_PATH
    client = http_client or httpx.Client(timeout=30.0)
    try:
        anonymous = client.get(url)
        authenticated = client.get(url, headers={"Authorization": f"Bearer {id_token}"})
    finally:
        if http_client is None:
            client.close()

    statuses = {"anonymous": anonymous.status_code, "authenticated": authenticated.status_code}
    logger.info(f"GET {url}: {statuses}")
    return statuses


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create the default Cognito user and smoke-test the API")
    parser.add_argument("--stack", default="dev", help="Pulumi stack name (default: dev)")
    parser.add_argument("--username", default=DEFAULT_USERNAME, help="Must not be an email address")
    parser.add_argument("--email", default=DEFAULT_EMAIL)
    parser.add_argument("--password", default=None, help=f"Defaults to ${PASSWORD_ENV_VAR}")
    parser.add_argument("--region", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()

    password = args.password or os.getenv(PASSWORD_ENV_VAR)
    if not password:
        logger.error(f"Pass --password or set {PASSWORD_ENV_VAR}")
        sys.exit(1)

    try:
        outputs = get_stack_outputs(args.stack)
        bootstrap = CognitoBootstrap(
            user_pool_id=outputs["cognito_user_pool_id"],
            client_id=outputs["cognito_user_pool_client_id"],
            region=args.region,
        )
        bootstrap.ensure_user(args.username, password, email=args.email)
        id_token = bootstrap.sign_in(args.username, password)
        statuses = smoke_test(outputs["api_gateway_url"], id_token)
    except (AuthSetupError, ClientError, httpx.HTTPError) as e:
        logger.error(f"Auth setup failed: {e}")
        sys.exit(1)

    sys.exit(0 if statuses["authenticated"] == 200 else 1)


if __name__ == "__main__":
    main()
