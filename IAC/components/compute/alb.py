"""
Application Load Balancer Component for the API Service.

The 3-Resource Chain:
1. Load Balancer: internet-facing, spans every public subnet. Its DNS name is
   the target of API Gateway's HTTP proxy integration.
2. Target Group: IP targets (Fargate awsvpc tasks register by ENI IP) on the
   container port 8080.
   - Health check: GET /health, 200 only, 2 healthy / 3 unhealthy,
     5s timeout, 30s interval. /health is also one of the public API routes.
3. Listener: HTTP :80, forwards everything to the target group.

The ECS service attaches itself to the target group (compute/ecs_service.py)
and must wait for the listener, otherwise ECS rejects a target group that
is not yet associated with a load balancer.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from IAC.configs.constants import HEALTH_CHECK_PATH, PORTS
from IAC.utils.tags import create_tags


@dataclass
class AlbOutputs:
    """Output values from ALB component."""
    alb_arn: pulumi.Output[str]
    alb_dns_name: pulumi.Output[str]
    listener_arn: pulumi.Output[str]
    target_group_arn: pulumi.Output[str]


class AlbComponent(pulumi.ComponentResource):
    """
    Internet-facing Application Load Balancer in front of the ECS service.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:Alb", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.alb = aws.lb.LoadBalancer(
            f"{name}-alb",
            name=f"{name}-alb",
            internal=False,
            load_balancer_type="application",
            security_groups=[security_group_id],
            subnets=subnet_ids,
            enable_deletion_protection=False,
            tags=create_tags(environment, f"{name}-alb"),
            opts=child_opts,
        )

        self.target_group = aws.lb.TargetGroup(
            f"{name}-tg",
            name=f"{name}-tg",
            port=PORTS["container"],
            protocol="HTTP",
            vpc_id=vpc_id,
            target_type="ip",
            health_check=aws.lb.TargetGroupHealthCheckArgs(
                enabled=True,
                path=HEALTH_CHECK_PATH,
                port="traffic-port",
                protocol="HTTP",
                healthy_threshold=2,
                unhealthy_threshold=3,
                timeout=5,
                interval=30,
                matcher="200",
            ),
            tags=create_tags(environment, f"{name}-tg"),
            opts=child_opts,
        )

        self.listener = aws.lb.Listener(
            f"{name}-listener",
            load_balancer_arn=self.alb.arn,
            port=PORTS["http"],
            protocol="HTTP",
            default_actions=[
                aws.lb.ListenerDefaultActionArgs(
                    type="forward",
                    target_group_arn=self.target_group.arn,
                ),
            ],
            tags=create_tags(environment, f"{name}-listener"),
            opts=child_opts,
        )

        self.register_outputs({
            "alb_arn": self.alb.arn,
            "alb_dns_name": self.alb.dns_name,
            "listener_arn": self.listener.arn,
            "target_group_arn": self.target_group.arn,
        })

    def get_outputs(self) -> AlbOutputs:
        """Get ALB output values."""
        return AlbOutputs(
            alb_arn=self.alb.arn,
            alb_dns_name=self.alb.dns_name,
            listener_arn=self.listener.arn,
            target_group_arn=self.target_group.arn,
        )
