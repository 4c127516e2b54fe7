"""
IAM policy document builders.

Documents are plain dicts; wrap with pulumi.Output.json_dumps when any
Resource value is an Output.
"""

import json
from typing import Any

POLICY_VERSION = "2012-10-17"


def assume_role_policy(service: str) -> str:
    """Trust policy letting an AWS service principal assume the role."""
    return json.dumps({
        "Version": POLICY_VERSION,
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"Service": service},
            "Action": "sts:AssumeRole",
        }],
    })


def statement(actions: list[str] | tuple[str, ...], resources: Any) -> dict[str, Any]:
    """Single Allow statement."""
    return {
        "Effect": "Allow",
        "Action": list(actions),
        "Resource": resources,
    }


def policy_document(*statements: dict[str, Any]) -> dict[str, Any]:
    """Wrap statements into a policy document."""
    return {
        "Version": POLICY_VERSION,
        "Statement": list(statements),
    }
