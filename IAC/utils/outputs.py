"""
Stack output helpers.

Writes resolved stack outputs to a dotenv file so local tooling
(setup_auth, docker builds) can read them without calling Pulumi.
"""

from pathlib import Path

import pulumi


def write_outputs_to_env(
    outputs: dict[str, pulumi.Input[str]],
    filename: str,
) -> None:
    """
    Write stack outputs as KEY=value lines once they resolve.

    Keys are upper-cased. Nothing is written during preview because
    output values are not known yet.

    Args:
        outputs: Export name to output value
        filename: Destination dotenv file path
    """
    keys = list(outputs)

    def _write(values: list) -> None:
        if pulumi.runtime.is_dry_run():
            return
        lines = [f"{key.upper()}={value}" for key, value in zip(keys, values)]
        Path(filename).write_text("\n".join(lines) + "\n", encoding="utf-8")
        pulumi.log.info(f"Wrote {len(lines)} outputs to {filename}")

    pulumi.Output.all(*outputs.values()).apply(_write)
