"""
Utility functions for Pulumi infrastructure.

Provides naming conventions, tag factories, policy builders and output utilities.
"""

from IAC.utils.naming import ResourceNamer
from IAC.utils.tags import create_tags, merge_tags
from IAC.utils.outputs import write_outputs_to_env
from IAC.utils.policies import assume_role_policy, policy_document, statement

__all__ = [
    "ResourceNamer",
    "create_tags",
    "merge_tags",
    "write_outputs_to_env",
    "assume_role_policy",
    "policy_document",
    "statement",
]
