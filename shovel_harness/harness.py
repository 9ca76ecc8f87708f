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


"""Run test cases in parallel: stage, deploy, wait, invoke, tear down."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from rich.panel import Panel
from rich.table import Table

from shovel_harness import console, logger
from shovel_harness.config import HarnessSettings
from shovel_harness.errors import HarnessError, InvocationError
from shovel_harness.kube import PodController
from shovel_harness.staging import OutputStaging
from shovel_harness.testcase import TestCase
from shovel_harness.utils import run_plugin

STEP_STAGE = "stage"
STEP_RENDER = "render"
STEP_DEPLOY = "deploy"
STEP_WAIT = "wait"
STEP_INVOKE = "invoke"
STEP_VERIFY = "verify"

# Takes rendered plugin args, returns (returncode, stdout, stderr).
Runner = Callable[[list[str]], tuple[int, str, str]]


@dataclass
class CaseResult:
    """Outcome of one test case.

    Attributes:
        name: Test case name.
        pod_name: Name of the pod the case deployed.
        namespace: Namespace of that pod.
        passed: Whether every step succeeded.
        step: Step the case failed at, or None if it passed.
        error: Error message for a failed case.
        args: Rendered plugin arguments.
        stdout: Plugin standard output.
        stderr: Plugin standard error.
        output: Staged output path for downloading cases.
        log: Console output captured while the case ran.
    """

    name: str
    pod_name: str
    namespace: str
    passed: bool = False
    step: str | None = None
    error: str | None = None
    args: list[str] | None = None
    stdout: str = ""
    stderr: str = ""
    output: Path | None = None
    log: str = ""


class Harness:
    """Drive plugin test cases against freshly deployed pods.

    Cases run concurrently; correctness relies on every case using its own
    pod name, label and staging directory rather than on locking.
    """

    def __init__(
        self,
        settings: HarnessSettings,
        controller: PodController,
        runner: Runner | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.settings = settings
        self.controller = controller
        self.runner = runner if runner is not None else self._run_plugin
        self.cancel = cancel if cancel is not None else threading.Event()

    def _run_plugin(self, args: list[str]) -> tuple[int, str, str]:
        return run_plugin(
            self.settings.plugin_binary,
            args,
            kubeconfig=self.settings.resolved_kubeconfig(),
            timeout=self.settings.plugin_timeout,
        )

    def abort(self) -> None:
        """Stop every pending readiness wait."""
        self.cancel.set()

    def run_case(self, command: str, case: TestCase, staging: OutputStaging) -> CaseResult:
        """Run one case. The pod is deleted on every exit path once created.

        Args:
            command: Plugin subcommand under test.
            case: Test case to run.
            staging: Staging directory of the command.

        Returns:
            The case result. Harness errors are recorded on the result;
            anything else propagates after teardown.
        """
        result = CaseResult(name=case.name, pod_name=case.pod_name, namespace=self.controller.namespace)
        step = STEP_STAGE
        try:
            with ExitStack() as stack:
                if not case.host_output:
                    case.output = staging.case_output()
                    result.output = case.output

                step = STEP_RENDER
                result.args = case.format_args(command, self.settings.dumper_image)

                step = STEP_DEPLOY
                self.controller.deploy(case.pod)
                stack.callback(self.controller.teardown, case.pod_name)

                step = STEP_WAIT
                self.controller.wait_ready(
                    case.labels,
                    timeout=self.settings.ready_timeout,
                    poll_interval=self.settings.ready_poll_interval,
                    cancel=self.cancel,
                )

                step = STEP_INVOKE
                console.print(f"[yellow]ℹ️  Running {self.settings.plugin_binary} {' '.join(result.args)}[/yellow]")
                returncode, result.stdout, result.stderr = self.runner(result.args)
                if returncode != 0:
                    raise InvocationError(
                        f"{self.settings.plugin_binary} {command} exited with code {returncode}: "
                        f"{result.stderr.strip()[:500]}"
                    )

                step = STEP_VERIFY
                if case.output is not None and not case.output.is_file():
                    raise InvocationError(f"Expected output file {case.output} was not created")
            result.passed = True
            console.print(f"[green]✅ {case.name}[/green]")
        except HarnessError as err:
            result.step = step
            result.error = str(err)
            logger.error(
                "Case '%s' aborted at step %s (pod %s/%s): %s",
                case.name, step, result.namespace, result.pod_name, err,
            )
            console.print(f"[red]❌ {case.name} ({step}): {err}[/red]")
        return result

    def _run_buffered(self, command: str, case: TestCase, staging: OutputStaging) -> CaseResult:
        with console.buffered() as buf:
            result = self.run_case(command, case, staging)
        result.log = buf.getvalue()
        return result

    def run_command(self, command: str, cases: list[TestCase], workers: int | None = None) -> list[CaseResult]:
        """Run every case of a command in parallel.

        The command's staging directory is created before the first case and
        removed after the last one finished.

        Args:
            command: Plugin subcommand under test.
            cases: Cases to run.
            workers: Parallelism override, or None for the configured maximum.

        Returns:
            Results in the same order as ``cases``.
        """
        if not cases:
            return []

        max_workers = min(len(cases), workers or self.settings.max_workers)
        console.print(Panel.fit(f"Running {len(cases)} '{command}' test cases", style="bold blue"))

        results: dict[int, CaseResult] = {}
        with OutputStaging(self.settings.output_root, command, keep=self.settings.keep_outputs) as staging:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(self._run_buffered, command, case, staging): idx
                    for idx, case in enumerate(cases)
                }
                try:
                    for future in as_completed(futures):
                        result = future.result()
                        results[futures[future]] = result
                        if result.log:
                            console.print(result.log, end="", markup=False, highlight=False)
                except BaseException:
                    self.abort()
                    raise

        return [results[idx] for idx in range(len(cases))]


def print_summary(command: str, results: list[CaseResult]) -> None:
    """Print a table of case outcomes."""
    table = Table(title=f"{command} results")
    table.add_column("Case")
    table.add_column("Pod")
    table.add_column("Result")
    table.add_column("Failed step")
    for result in results:
        status = "[green]passed[/green]" if result.passed else "[red]failed[/red]"
        table.add_row(result.name, result.pod_name, status, result.step or "")
    console.print(table)
