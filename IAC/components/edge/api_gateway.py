"""
API Gateway Component for Authenticated Backend Routing.

Concept: a managed, authenticating proxy in front of the public ALB.

The Resource Chain:
1. API: HTTP API with CORS (origins *, GET/POST/PUT/DELETE/OPTIONS,
   Content-Type/Authorization). CORS preflight is answered by API Gateway.
2. Authorizer: JWT authorizer trusting the Cognito user pool issuer with the
   app client as audience. Missing or invalid tokens get 401; tokens lacking
   a required scope get 403.
3. Integration: HTTP_PROXY to http://{alb_dns}. "overwrite:path" forwards the
   original request path verbatim; no request or response transformation.
4. Routes, generated from one declared list:
   - every (method, path) in PUBLIC_ROUTES -> authorization NONE
   - ANY / and ANY /{proxy+}               -> authorization JWT
   A path is open only if it is listed in PUBLIC_ROUTES; the routing table
   and the exemption set cannot drift apart.
5. Stage: "$default" with auto-deploy, so api_endpoint is the base URL.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    GUARDED_ROUTE_KEYS,
    PUBLIC_ROUTES,
)
from IAC.utils.tags import create_tags

AUTH_NONE = "NONE"
AUTH_JWT = "JWT"


def build_route_table(
    public_routes: tuple[tuple[str, str], ...] = PUBLIC_ROUTES,
) -> dict[str, str]:
    """
    Map every route key to its authorization type.

    Args:
        public_routes: (method, path) pairs reachable without a token

    Returns:
        Ordered mapping, public routes first, then the guarded root and proxy routes

    Raises:
        ValueError: If a public route duplicates another or shadows a guarded route
    """
    table: dict[str, str] = {}
    for method, path in public_routes:
        route_key = f"{method.upper()} {path}"
        if route_key in table or route_key in GUARDED_ROUTE_KEYS:
            raise ValueError(f"Duplicate or reserved public route: {route_key}")
        table[route_key] = AUTH_NONE
    for route_key in GUARDED_ROUTE_KEYS:
        table[route_key] = AUTH_JWT
    return table


def route_resource_suffix(route_key: str) -> str:
    """'GET /health' -> 'get-health', 'ANY /{proxy+}' -> 'any-proxy'."""
    method, path = route_key.split(" ", 1)
    slug = "".join(char if char.isalnum() else "-" for char in path).strip("-")
    slug = "-".join(part for part in slug.split("-") if part)
    return f"{method.lower()}-{slug or 'root'}"


@dataclass
class ApiGatewayOutputs:
    """Output values from API Gateway component."""
    api_endpoint: pulumi.Output[str]
    api_id: pulumi.Output[str]
    route_keys: list[str]


class ApiGatewayComponent(pulumi.ComponentResource):
    """
    HTTP API with a Cognito JWT authorizer proxying to the public ALB.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        alb_dns_name: pulumi.Input[str],
        user_pool_client_id: pulumi.Input[str],
        issuer: pulumi.Input[str],
        public_routes: tuple[tuple[str, str], ...] = PUBLIC_ROUTES,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:edge:ApiGateway", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        self.route_table = build_route_table(public_routes)

        self.api = aws.apigatewayv2.Api(
            f"{name}-api",
            name=f"{name}-api",
            protocol_type="HTTP",
            cors_configuration=aws.apigatewayv2.ApiCorsConfigurationArgs(
                allow_origins=["*"],
                allow_methods=list(CORS_ALLOW_METHODS),
                allow_headers=list(CORS_ALLOW_HEADERS),
                max_age=86400,
            ),
            tags=create_tags(environment, f"{name}-api"),
            opts=child_opts,
        )

        self.authorizer = aws.apigatewayv2.Authorizer(
            f"{name}-authorizer",
            name=f"{name}-authorizer",
            api_id=self.api.id,
            authorizer_type="JWT",
            identity_sources=["$request.header.Authorization"],
            jwt_configuration=aws.apigatewayv2.AuthorizerJwtConfigurationArgs(
                audiences=[user_pool_client_id],
                issuer=issuer,
            ),
            opts=child_opts,
        )

        self.integration = aws.apigatewayv2.Integration(
            f"{name}-integration",
            api_id=self.api.id,
            integration_type="HTTP_PROXY",
            integration_method="ANY",
            integration_uri=pulumi.Output.concat("http://", alb_dns_name),
            request_parameters={
                "overwrite:path": "$request.path",
            },
            payload_format_version="1.0",
            timeout_milliseconds=30000,
            opts=child_opts,
        )
        target = self.integration.id.apply(lambda integration_id: f"integrations/{integration_id}")

        self.routes: dict[str, aws.apigatewayv2.Route] = {}
        for route_key, authorization_type in self.route_table.items():
            guarded = authorization_type == AUTH_JWT
            self.routes[route_key] = aws.apigatewayv2.Route(
                f"{name}-route-{route_resource_suffix(route_key)}",
                api_id=self.api.id,
                route_key=route_key,
                target=target,
                authorization_type=authorization_type,
                authorizer_id=self.authorizer.id if guarded else None,
                opts=child_opts,
            )

        self.stage = aws.apigatewayv2.Stage(
            f"{name}-stage",
            api_id=self.api.id,
            name="$default",
            auto_deploy=True,
            tags=create_tags(environment, f"{name}-stage"),
            opts=pulumi.ResourceOptions(parent=self, depends_on=list(self.routes.values())),
        )

        self.register_outputs({
            "api_endpoint": self.api.api_endpoint,
            "api_id": self.api.id,
            "route_keys": list(self.route_table),
        })

    def get_outputs(self) -> ApiGatewayOutputs:
        """Get API Gateway output values."""
        return ApiGatewayOutputs(
            api_endpoint=self.api.api_endpoint,
            api_id=self.api.id,
            route_keys=list(self.route_table),
        )
