"""
Pulumi component resources for Code Refactor infrastructure.

Each submodule provides reusable ComponentResource classes:
- networking: VPC, public subnets, security groups, VPC endpoints
- storage: knowledge-base bucket, Aurora PostgreSQL, ECR
- security: database credential secret, Bedrock and CI roles
- identity: Cognito user pool, client and hosted domain
- compute: ECS cluster/service, ALB, schema migration Lambda
- edge: API Gateway, CloudFront frontend
- configuration: Parameter Store / Secrets Manager publisher
"""
