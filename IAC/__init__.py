"""
Pulumi infrastructure-as-code for the Code Refactor tool.

This package defines AWS infrastructure including:
- VPC with public subnets across two availability zones (no NAT)
- Aurora PostgreSQL Serverless v2 with a pgvector schema migration Lambda
- Cognito user pool, client and hosted login domain
- Bedrock knowledge-base / agent roles and a GitHub Actions deployment role
- ECS Fargate service behind an ALB, fronted by an authenticating API Gateway
- S3 + CloudFront frontend
- SSM Parameter Store / Secrets Manager configuration under /code-refactor
"""
