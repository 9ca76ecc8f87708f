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


"""Ordered command-line token builder for plugin invocations."""

from __future__ import annotations


class Args:
    """Accumulate CLI tokens in append order.

    The first token is expected to be the positional subcommand added with
    :meth:`append_raw`; everything after it is ``--key value`` pairs or bare
    ``--flag`` tokens. Keys are not validated or de-duplicated.
    """

    def __init__(self) -> None:
        self._tokens: list[str] = []

    def append_raw(self, token: str) -> Args:
        """Append a positional token verbatim."""
        self._tokens.append(token)
        return self

    def append(self, key: str, value: str) -> Args:
        """Append ``--key`` followed by ``value``."""
        self._tokens.extend((f"--{key}", value))
        return self

    def append_key(self, key: str) -> Args:
        """Append a bare ``--key`` flag."""
        self._tokens.append(f"--{key}")
        return self

    def get(self) -> list[str]:
        """Return a copy of the accumulated tokens."""
        return list(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"Args({self._tokens!r})"
