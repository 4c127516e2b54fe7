"""
Pulumi program entry point for Code Refactor infrastructure.

Loads the stack context, declares every component (see IAC/stack.py for
the layer order), writes the outputs to .env.infra for local tooling and
exports them on the stack.
"""

import pulumi

from IAC.configs.environment import get_config
from IAC.stack import build_stack
from IAC.utils.outputs import write_outputs_to_env


def main() -> None:
    """Deploy Code Refactor infrastructure."""
    config = get_config()
    pulumi.log.info(
        f"Deploying {config.environment} to {config.account_id}/{config.region} "
        f"across {', '.join(config.availability_zones)}"
    )

    stack = build_stack(config)

    # Write outputs to .env file for local tooling
    write_outputs_to_env(stack.outputs, ".env.infra")

    # Export to Pulumi stack
    for key, value in stack.outputs.items():
        pulumi.export(key, value)


# Execute
main()
