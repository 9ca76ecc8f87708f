# /*
# Copyright 2026 The Grove Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */


"""
cli.py - Unified CLI for kubectl-shovel end-to-end tests.

Subcommands:
    run        Run the test case matrix for a plugin command
    cases      Inspect the test case matrix (list, render)

Examples:
    # Run every trace case against the current kube context
    shovel-harness run trace

    # Only the multi-container cases, three at a time
    shovel-harness run gcdump --case multicontainer --workers 3

    # Pass an extra flag to every invocation
    shovel-harness run trace --arg duration=10s

    # Show the rendered invocations without deploying anything
    shovel-harness cases render dump

Environment Variables:
    - KUBECONFIG (default: ~/.kube/config)
    - SHOVEL_NAMESPACE (default: default)
    - SHOVEL_DUMPER_IMAGE, SHOVEL_TARGET_IMAGE, SHOVEL_SIDECAR_IMAGE
    - SHOVEL_READY_TIMEOUT, SHOVEL_MAX_WORKERS, SHOVEL_OUTPUT_ROOT
"""

from __future__ import annotations

import logging
import sys

import typer

from shovel_harness import console
from shovel_harness.commands import cases_cmd, run_cmd

app = typer.Typer(
    help="Unified CLI for kubectl-shovel end-to-end tests.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.command("run")(run_cmd.run)
app.add_typer(cases_cmd.app, name="cases")


def main() -> None:
    try:
        app()
    except Exception as e:
        console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
