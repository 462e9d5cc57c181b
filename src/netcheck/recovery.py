# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Recovery actions invoked once the failure threshold is reached."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from .config import DEFAULT_RECOVERY_COMMAND

logger = logging.getLogger(__name__)


class RecoveryTrigger(Protocol):
    """Single-call recovery collaborator; returns True on success."""

    def trigger(self) -> bool: ...


class CommandRecovery(RecoveryTrigger):
    """Run an external command (by default a reboot) and report its exit status."""

    def __init__(
        self,
        command: str | Sequence[str] = DEFAULT_RECOVERY_COMMAND,
        *,
        runner: Callable[..., Any] = subprocess.run,
    ):
        self.argv = shlex.split(command) if isinstance(command, str) else list(command)
        self._runner = runner

    def trigger(self) -> bool:
        logger.warning("Recovery! Running %s", shlex.join(self.argv))
        try:
            completed = self._runner(self.argv, check=False)
        except OSError as exc:
            logger.error("Unable to run recovery command %s: %s", self.argv[0], exc)
            return False
        if completed.returncode != 0:
            logger.error("Recovery command exited with status %s", completed.returncode)
            return False
        return True


__all__ = ["CommandRecovery", "RecoveryTrigger"]
