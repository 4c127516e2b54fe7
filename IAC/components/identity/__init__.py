"""
Identity components.

Components:
- CognitoComponent: User pool, app client and hosted login domain
"""

from IAC.components.identity.cognito import CognitoComponent, CognitoOutputs, hosted_ui_url

__all__ = [
    "CognitoComponent",
    "CognitoOutputs",
    "hosted_ui_url",
]
