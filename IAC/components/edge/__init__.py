"""
Edge components for CDN and API routing.

Components:
- CloudFrontComponent: Frontend bucket and CDN distribution with SPA fallback
- ApiGatewayComponent: HTTP API with Cognito JWT authorizer proxying to the ALB
"""

from IAC.components.edge.cloudfront import CloudFrontComponent, CloudFrontOutputs
from IAC.components.edge.api_gateway import (
    ApiGatewayComponent,
    ApiGatewayOutputs,
    build_route_table,
)

__all__ = [
    "CloudFrontComponent",
    "CloudFrontOutputs",
    "ApiGatewayComponent",
    "ApiGatewayOutputs",
    "build_route_table",
]
