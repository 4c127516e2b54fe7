"""
Unit tests for the Cognito bootstrap script.

Tests stack output parsing, user creation, sign-in and the health smoke test.
Dependencies: pytest, unittest.mock, httpx, backend.scripts.setup_auth
System role: Auth bootstrap validation
"""

import json
import subprocess
from unittest.mock import MagicMock, patch

import httpx
import pytest
from botocore.exceptions import ClientError

from backend.scripts.setup_auth import (
    AuthSetupError,
    CognitoBootstrap,
    get_stack_outputs,
    smoke_test,
)

OUTPUTS = {
    "cognito_user_pool_id": "us-east-1_pool",
    "cognito_user_pool_client_id": "client123",
    "api_gateway_url": "https://abc.execute-api.us-east-1.amazonaws.com",
}


@pytest.fixture
def cognito():
    return MagicMock()


@pytest.fixture
def bootstrap(cognito):
    return CognitoBootstrap(user_pool_id="us-east-1_pool", client_id="client123", client=cognito)


class TestStackOutputs:
    """Test suite for get_stack_outputs."""

    def test_reads_json_outputs(self):
        """Test outputs are parsed from pulumi stack output --json."""
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=json.dumps(OUTPUTS), stderr="")
        with patch("backend.scripts.setup_auth.subprocess.run", return_value=completed) as run:
            outputs = get_stack_outputs("dev")

        assert outputs == OUTPUTS
        assert run.call_args.args[0] == ["pulumi", "stack", "output", "--json", "--stack", "dev"]

    def test_missing_outputs_raise(self):
        """Test a stack without the Cognito outputs is rejected."""
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="{}", stderr="")
        with patch("backend.scripts.setup_auth.subprocess.run", return_value=completed):
            with pytest.raises(AuthSetupError, match="cognito_user_pool_id"):
                get_stack_outputs("dev")

    def test_pulumi_failure_raises(self):
        """Test a failing pulumi call becomes AuthSetupError."""
        error = subprocess.CalledProcessError(1, "pulumi", stderr="no stack")
        with patch("backend.scripts.setup_auth.subprocess.run", side_effect=error):
            with pytest.raises(AuthSetupError, match="no stack"):
                get_stack_outputs("dev")


class TestCognitoBootstrap:
    """Test suite for user creation and sign-in."""

    def test_creates_user_with_permanent_password(self, bootstrap, cognito):
        """
        Test a new user is created silently and given a permanent password.

        Arrange: Pool without the user
        Act: ensure_user
        Assert: SUPPRESS create, then permanent password
        """
        # Act
        created = bootstrap.ensure_user("admin", "Secret#123")

        # Assert
        assert created is True
        create_kwargs = cognito.admin_create_user.call_args.kwargs
        assert create_kwargs["MessageAction"] == "SUPPRESS"
        assert {"Name": "email_verified", "Value": "true"} in create_kwargs["UserAttributes"]
        cognito.admin_set_user_password.assert_called_once_with(
            UserPoolId="us-east-1_pool",
            Username="admin",
            Password="Secret#123",
            Permanent=True,
        )

    def test_existing_user_is_tolerated(self, bootstrap, cognito):
        """Test UsernameExistsException still resets the password."""
        cognito.admin_create_user.side_effect = ClientError(
            {"Error": {"Code": "UsernameExistsException", "Message": "exists"}}, "AdminCreateUser"
        )

        assert bootstrap.ensure_user("admin", "Secret#123") is False
        cognito.admin_set_user_password.assert_called_once()

    def test_other_create_errors_propagate(self, bootstrap, cognito):
        """Test unexpected Cognito errors are not swallowed."""
        cognito.admin_create_user.side_effect = ClientError(
            {"Error": {"Code": "InvalidPasswordException", "Message": "weak"}}, "AdminCreateUser"
        )

        with pytest.raises(ClientError):
            bootstrap.ensure_user("admin", "weak")

    def test_sign_in_returns_id_token(self, bootstrap, cognito):
        """Test ADMIN_USER_PASSWORD_AUTH yields the ID token."""
        cognito.admin_initiate_auth.return_value = {"AuthenticationResult": {"IdToken": "jwt"}}

        assert bootstrap.sign_in("admin", "Secret#123") == "jwt"
        assert cognito.admin_initiate_auth.call_args.kwargs["AuthFlow"] == "ADMIN_USER_PASSWORD_AUTH"

    def test_sign_in_challenge_raises(self, bootstrap, cognito):
        """Test a pending challenge is reported instead of returning no token."""
        cognito.admin_initiate_auth.return_value = {"ChallengeName": "NEW_PASSWORD_REQUIRED"}

        with pytest.raises(AuthSetupError, match="NEW_PASSWORD_REQUIRED"):
            bootstrap.sign_in("admin", "Secret#123")


class TestSmokeTest:
    """Test suite for the health check calls."""

    def test_health_called_anonymously_and_with_token(self):
        """Test both calls hit /health and only the second carries the bearer token."""
        seen = []

        def respond(request):
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(200, json={"status": "ok"})

        client = httpx.Client(transport=httpx.MockTransport(respond))

        statuses = smoke_test(OUTPUTS["api_gateway_url"] + "/", "jwt", http_client=client)

        assert statuses == {"anonymous": 200, "authenticated": 200}
        assert seen == [None, "Bearer jwt"]


class TestDefaultUser:
    """Test suite for the default user against the pool's sign-in mode."""

    def test_default_username_fits_email_alias_pool(self):
        """Test the default username is not email-shaped when email is a sign-in alias."""
        from IAC.components.identity.cognito import SIGN_IN_ALIASES
        from backend.scripts.setup_auth import DEFAULT_EMAIL, DEFAULT_USERNAME

        assert "email" in SIGN_IN_ALIASES
        assert "@" not in DEFAULT_USERNAME
        assert "@" in DEFAULT_EMAIL

    def test_email_attribute_is_separate_from_username(self, bootstrap, cognito):
        """Test ensure_user sends the email as an attribute, not as the username."""
        bootstrap.ensure_user("admin", "Secret#123", email="ops@example.com")

        create_kwargs = cognito.admin_create_user.call_args.kwargs
        assert create_kwargs["Username"] == "admin"
        assert {"Name": "email", "Value": "ops@example.com"} in create_kwargs["UserAttributes"]
