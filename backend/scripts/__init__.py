"""
Operator scripts.

- infra_cli: deploy, destroy, test, lint, clean
- setup_auth: default Cognito user and API smoke test
"""
