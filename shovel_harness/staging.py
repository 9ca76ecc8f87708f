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


"""Filesystem staging for outputs downloaded by the plugin."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from shovel_harness import console, logger
from shovel_harness.constants import OUTPUT_FILE_NAME, PLUGIN_NAME


class OutputStaging:
    """Per-command staging directory ``<root>/kubectl-shovel/<command>``.

    The command directory is created once before its cases run and removed
    once after the last of them has finished. Each downloading case gets its
    own randomly named subdirectory, so parallel cases never share a path.
    """

    def __init__(self, root: Path, command: str, keep: bool = False) -> None:
        self.root = Path(root)
        self.command = command
        self.keep = keep
        self.dir = self.root / PLUGIN_NAME / command

    def prepare(self) -> Path:
        logger.info("Create directory (%s) for command (%s) tests outputs", self.dir, self.command)
        self.dir.mkdir(parents=True, exist_ok=True)
        return self.dir

    def case_output(self) -> Path:
        """Create a unique directory for one case and return its output file path."""
        case_dir = Path(tempfile.mkdtemp(dir=self.dir))
        output = case_dir / OUTPUT_FILE_NAME
        console.print(f"[yellow]ℹ️  Output for test case will be stored at: {output}[/yellow]")
        return output

    def cleanup(self) -> None:
        """Remove the command directory. Best effort: failures are only logged."""
        if self.keep:
            logger.info("Keeping outputs for command (%s) in %s", self.command, self.dir)
            return
        logger.info("Remove directory (%s) for command (%s) tests outputs", self.dir, self.command)
        try:
            shutil.rmtree(self.dir)
        except OSError as err:
            logger.warning("Could not remove %s: %s", self.dir, err)

    def __enter__(self) -> OutputStaging:
        self.prepare()
        return self

    def __exit__(self, *exc) -> None:
        self.cleanup()
