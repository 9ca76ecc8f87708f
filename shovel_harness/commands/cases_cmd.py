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


"""Cases subcommands (list, render)."""

from __future__ import annotations

import shlex
from pathlib import Path

import typer
from rich.table import Table

from shovel_harness import console
from shovel_harness.config import HarnessSettings
from shovel_harness.pods import default_container_name
from shovel_harness.staging import OutputStaging
from shovel_harness.testcase import default_cases

app = typer.Typer(help="Inspect the test case matrix.")


@app.command("list")
def list_cases() -> None:
    """List the default test cases and their pod topologies."""
    table = Table(title="Test cases")
    table.add_column("Case")
    table.add_column("Containers")
    table.add_column("Default container")
    table.add_column("Output")
    table.add_column("Extra args")
    for case in default_cases():
        containers = ", ".join(c.name for c in case.pod.spec.containers)
        table.add_row(
            case.name,
            containers,
            default_container_name(case.pod),
            "host" if case.host_output else "download",
            " ".join(case.args),
        )
    console.print(table)


@app.command("render")
def render(
    command: str = typer.Argument(..., help="Plugin subcommand under test"),
    output_root: Path | None = typer.Option(
        None, "--output-root", help="Root directory for downloaded outputs"),
) -> None:
    """Print the plugin invocation of every case without touching the cluster."""
    settings = HarnessSettings()
    if output_root is not None:
        settings = settings.model_copy(update={"output_root": output_root})

    with OutputStaging(settings.output_root, command) as staging:
        for case in default_cases(target_image=settings.target_image, sidecar_image=settings.sidecar_image):
            if not case.host_output:
                case.output = staging.case_output()
            args = case.format_args(command, settings.dumper_image)
            console.print(f"[bold]{case.name}[/bold]")
            console.print(f"  {settings.plugin_binary} {shlex.join(args)}", markup=False, highlight=False, soft_wrap=True)
