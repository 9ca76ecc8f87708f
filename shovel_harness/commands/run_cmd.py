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


"""Run subcommand: execute plugin test cases against the cluster."""

from __future__ import annotations

from pathlib import Path

import typer

from shovel_harness import console
from shovel_harness.config import HarnessSettings, display_settings
from shovel_harness.harness import Harness, print_summary
from shovel_harness.kube import PodController
from shovel_harness.testcase import TestCase, default_cases
from shovel_harness.utils import parse_key_values, require_command


def select_cases(cases: list[TestCase], names: list[str]) -> list[TestCase]:
    """Keep only the cases whose name contains one of ``names`` (case-insensitive)."""
    if not names:
        return cases
    wanted = [name.lower() for name in names]
    return [case for case in cases if any(name in case.name.lower() for name in wanted)]


def run(
    command: str = typer.Argument(..., help="Plugin subcommand under test (e.g. trace, gcdump)"),
    case: list[str] = typer.Option(
        [], "--case", help="Only run cases whose name contains this text (repeatable)"),
    arg: list[str] = typer.Option(
        [], "--arg", help="Extra KEY=VALUE plugin argument added to every case (repeatable)"),
    workers: int | None = typer.Option(
        None, "--workers", help="Cases to run in parallel (overrides SHOVEL_MAX_WORKERS)"),
    namespace: str | None = typer.Option(
        None, "--namespace", help="Namespace for target pods (overrides SHOVEL_NAMESPACE)"),
    dumper_image: str | None = typer.Option(
        None, "--dumper-image", help="Dumper image passed to the plugin"),
    kubeconfig: Path | None = typer.Option(
        None, "--kubeconfig", help="Kubeconfig file (overrides KUBECONFIG)"),
    output_root: Path | None = typer.Option(
        None, "--output-root", help="Root directory for downloaded outputs"),
    keep_outputs: bool = typer.Option(
        False, "--keep-outputs", help="Keep downloaded outputs after the run"),
) -> None:
    """Deploy target pods, run the plugin against each, and tear them down."""
    settings = HarnessSettings()
    overrides: dict = {}
    if workers is not None:
        overrides["max_workers"] = workers
    if namespace is not None:
        overrides["namespace"] = namespace
    if dumper_image is not None:
        overrides["dumper_image"] = dumper_image
    if kubeconfig is not None:
        overrides["kubeconfig"] = kubeconfig
    if output_root is not None:
        overrides["output_root"] = output_root
    if keep_outputs:
        overrides["keep_outputs"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    extra_args = parse_key_values(arg)
    cases = select_cases(
        default_cases(target_image=settings.target_image, sidecar_image=settings.sidecar_image),
        case,
    )
    if not cases:
        raise RuntimeError(f"No test cases match {case}")
    for test_case in cases:
        test_case.with_args(*extra_args)

    display_settings(settings)
    require_command(settings.plugin_binary)

    controller = PodController.from_kubeconfig(settings.resolved_kubeconfig(), settings.namespace)
    harness = Harness(settings, controller)
    results = harness.run_command(command, cases)
    print_summary(command, results)

    failed = [result for result in results if not result.passed]
    if failed:
        console.print(f"[red]❌ {len(failed)} of {len(results)} cases failed[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ All {len(results)} cases passed[/green]")
