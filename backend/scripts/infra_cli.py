"""
Operator CLI for the Code Refactor stack.

Usage:
    python -m backend.scripts.infra_cli deploy --stack dev
    python -m backend.scripts.infra_cli destroy --stack dev
    python -m backend.scripts.infra_cli test
    python -m backend.scripts.infra_cli lint
    python -m backend.scripts.infra_cli clean

Purpose:
- Package the schema migration Lambda and run `pulumi up`
- Tear the stack down, cleaning up ENIs and the credential secret the
  engine can leave behind
- Run the test suite and the linter
- Remove build artifacts

Dependencies: boto3, pulumi CLI
System role: Developer and CI entry point (console script `code-refactor-infra`)
"""

import argparse
import logging
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import boto3
from botocore.exceptions import ClientError

from IAC.configs.constants import (
    PROJECT_NAME,
    SCHEMA_LAMBDA_PIP_PLATFORM,
    SCHEMA_LAMBDA_PYTHON_VERSION,
)
from IAC.utils.naming import ResourceNamer
from IAC.utils.tags import project_tag_filter
from backend.observability.logger import configure_logging

logger = logging.getLogger(__name__)

COMMANDS = ("deploy", "destroy", "test", "lint", "clean")
LAMBDA_REQUIREMENTS = Path("backend") / "core" / "schema_migration" / "requirements.txt"


class InfraCommands:
    """Run deploy, destroy, test, lint and clean against one stack."""

    def __init__(self, stack: str = "dev", region: Optional[str] = None):
        """
        Initialize commands.

        Args:
            stack: Pulumi stack name
            region: AWS region for cleanup calls (boto3 default chain if None)
        """
        self.stack = stack
        self.region = region

        self.project_root = Path(__file__).parent.parent.parent
        self.build_dir = self.project_root / "build"
        self.lambda_package_dir = self.build_dir / "schema_lambda"
        self.credentials_secret_name = ResourceNamer(
            project=PROJECT_NAME, environment=stack
        ).name("db-secret")

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        logger.info(f"Running: {' '.join(command)}")
        return subprocess.run(
            command,
            cwd=self.project_root,
            check=True,
            capture_output=True,
            text=True,
        )

    def package_lambda(self) -> bool:
        """
        Build the migration Lambda bundle in build/schema_lambda.

        Installs the Lambda requirements with pip --target as manylinux
        CPython wheels for the runtime version, then copies the backend
        package next to them.

        Returns:
            bool: True if packaging succeeded
        """
        try:
            if self.lambda_package_dir.exists():
                shutil.rmtree(self.lambda_package_dir)
            self.lambda_package_dir.mkdir(parents=True)

            self._run([
                sys.executable, "-m", "pip", "install",
                "--target", str(self.lambda_package_dir),
                "--platform", SCHEMA_LAMBDA_PIP_PLATFORM,
                "--implementation", "cp",
                "--python-version", SCHEMA_LAMBDA_PYTHON_VERSION,
                "--only-binary=:all:",
                "-r", str(self.project_root / LAMBDA_REQUIREMENTS),
            ])
            shutil.copytree(
                self.project_root / "backend",
                self.lambda_package_dir / "backend",
                ignore=shutil.ignore_patterns("__pycache__", "*.pyc", "scripts"),
            )

            logger.info(f"✓ Lambda packaged in {self.lambda_package_dir}")
            return True

        except subprocess.CalledProcessError as e:
            logger.error(f"Lambda packaging failed: {e.stderr}")
            return False

    def deploy(self) -> bool:
        """Package the Lambda and run pulumi up."""
        if not self.package_lambda():
            return False
        try:
            self._run(["pulumi", "up", "--yes", "--stack", self.stack])
            logger.info(f"✓ Stack {self.stack} deployed")
            return True

        except subprocess.CalledProcessError as e:
            logger.error(f"Deploy failed: {e.stderr}")
            return False
        except FileNotFoundError:
            logger.error("Pulumi CLI not found. Install Pulumi and try again.")
            return False

    def _pulumi_destroy(self) -> bool:
        try:
            self._run(["pulumi", "destroy", "--yes", "--stack", self.stack])
            return True
        except subprocess.CalledProcessError as e:
            logger.error(f"Destroy failed: {e.stderr}")
            return False

    def destroy(self) -> bool:
        """
        Destroy the stack.

        A failed destroy is retried once after removing leftover ENIs.
        The credential secret is force-deleted and ENIs swept afterwards in
        every case.

        Returns:
            bool: True if pulumi destroy eventually succeeded
        """
        try:
            destroyed = self._pulumi_destroy()
            if not destroyed:
                logger.warning("Cleaning up network interfaces before retrying destroy")
                self.cleanup_network_interfaces()
                destroyed = self._pulumi_destroy()
        except FileNotFoundError:
            logger.error("Pulumi CLI not found. Install Pulumi and try again.")
            return False

        self.delete_credentials_secret()
        self.cleanup_network_interfaces()

        if destroyed:
            logger.info(f"✓ Stack {self.stack} destroyed")
        return destroyed

    def delete_credentials_secret(self) -> None:
        """Force-delete the database secret so a redeploy can reuse its name."""
        client = boto3.client("secretsmanager", region_name=self.region)
        try:
            client.delete_secret(
                SecretId=self.credentials_secret_name,
                ForceDeleteWithoutRecovery=True,
            )
            logger.info(f"✓ Deleted secret {self.credentials_secret_name}")
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ResourceNotFoundException":
                logger.info(f"Secret {self.credentials_secret_name} already gone")
                return
            logger.warning(f"Could not delete secret {self.credentials_secret_name}: {e}")

    def cleanup_network_interfaces(self) -> int:
        """
        Delete detached ENIs tagged with the project tag.

        Returns:
            int: Number of interfaces deleted
        """
        client = boto3.client("ec2", region_name=self.region)
        try:
            response = client.describe_network_interfaces(
                Filters=[
                    project_tag_filter(),
                    {"Name": "status", "Values": ["available"]},
                ]
            )
        except ClientError as e:
            logger.warning(f"Could not list network interfaces: {e}")
            return 0

        deleted = 0
        for interface in response.get("NetworkInterfaces", []):
            interface_id = interface["NetworkInterfaceId"]
            try:
                client.delete_network_interface(NetworkInterfaceId=interface_id)
                deleted += 1
                logger.info(f"✓ Deleted network interface {interface_id}")
            except ClientError as e:
                logger.warning(f"Could not delete network interface {interface_id}: {e}")
        return deleted

    def test(self) -> bool:
        """Run pytest over tests/."""
        try:
            result = self._run([sys.executable, "-m", "pytest", "tests"])
            logger.info(result.stdout)
            return True
        except subprocess.CalledProcessError as e:
            logger.error(f"Tests failed:\n{e.stdout}{e.stderr}")
            return False

    def lint(self) -> bool:
        """Run pylint over IAC and backend."""
        try:
            self._run([sys.executable, "-m", "pylint", "IAC", "backend"])
            logger.info("✓ Lint passed")
            return True
        except subprocess.CalledProcessError as e:
            logger.error(f"Lint failed:\n{e.stdout}{e.stderr}")
            return False

    def clean(self) -> bool:
        """Remove build/, .pytest_cache/ and every __pycache__ directory."""
        targets = [self.build_dir, self.project_root / ".pytest_cache"]
        targets.extend(self.project_root.rglob("__pycache__"))
        for target in targets:
            if target.is_dir():
                shutil.rmtree(target, ignore_errors=True)
                logger.debug(f"Removed {target}")
        logger.info("✓ Workspace cleaned")
        return True

    def run(self, command: str) -> bool:
        """Dispatch a command by name."""
        if command not in COMMANDS:
            logger.error(f"Unknown command: {command}")
            return False
        return getattr(self, command)()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="code-refactor-infra",
        description="Deploy, destroy, test, lint and clean the Code Refactor stack",
    )
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--stack", default="dev", help="Pulumi stack name (default: dev)")
    parser.add_argument("--region", default=None, help="AWS region for cleanup calls")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    commands = InfraCommands(stack=args.stack, region=args.region)
    success = commands.run(args.command)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
