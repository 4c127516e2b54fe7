"""
Runtime code shipped alongside the Code Refactor infrastructure.

- core.schema_migration: Lambda that ensures the pgvector knowledge-base schema
- boundary.aws: RDS Data API client
- scripts: operator CLI (deploy/destroy/test/lint/clean) and auth bootstrap
"""
