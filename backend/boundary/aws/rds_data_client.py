"""
RDS Data API client.

Executes SQL against the Aurora cluster over HTTPS, so the caller needs no
driver or network path to port 5432. Statements issued while the cluster is
resuming are retried with exponential backoff.

Dependencies: boto3, tenacity
System role: Database boundary for the schema migration Lambda
"""

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from backend.core.schema_migration.exceptions import DatabaseResumingError

logger = logging.getLogger(__name__)

RESUMING_ERROR_CODE = "DatabaseResumingException"
MAX_ATTEMPTS = 6


class RdsDataClient:
    """Thin wrapper over the rds-data ExecuteStatement API."""

    def __init__(
        self,
        cluster_arn: str,
        secret_arn: str,
        database: str,
        region: Optional[str] = None,
        client: Any = None,
    ) -> None:
        """
        Initialize Data API client.

        Args:
            cluster_arn: Aurora cluster ARN
            secret_arn: Secrets Manager ARN holding master credentials
            database: Target database name
            region: AWS region (falls back to the boto3 default chain)
            client: Pre-built boto3 rds-data client (tests)
        """
        self.cluster_arn = cluster_arn
        self.secret_arn = secret_arn
        self.database = database
        self.client = client or boto3.client("rds-data", region_name=region)

    def execute(self, sql: str, parameters: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Execute a single SQL statement.

        Args:
            sql: Statement text
            parameters: Optional Data API SqlParameter list

        Returns:
            Raw ExecuteStatement response

        Raises:
            DatabaseResumingError: Cluster still resuming after all retries
            ClientError: Any other Data API failure
        """
        logger.debug(f"{__name__}:execute - {sql.splitlines()[0][:80]}")
        return self._execute_with_retry(sql, parameters or [])

    @retry(
        retry=retry_if_exception_type(DatabaseResumingError),
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:execute - Cluster resuming, retry "
            f"{retry_state.attempt_number}/{MAX_ATTEMPTS}"
        ),
        reraise=True,
    )
    def _execute_with_retry(self, sql: str, parameters: List[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            return self.client.execute_statement(
                resourceArn=self.cluster_arn,
                secretArn=self.secret_arn,
                database=self.database,
                sql=sql,
                parameters=parameters,
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code == RESUMING_ERROR_CODE:
                raise DatabaseResumingError(str(e)) from e
            logger.error(f"{__name__}:execute - ClientError {error_code}: {e}")
            raise
