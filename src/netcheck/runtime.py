# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level netcheck facade wiring settings, prober, watchdog and recovery."""

from __future__ import annotations

from collections.abc import Callable

from .config import WatchdogSettings, load_settings
from .models.probe import ProbeResult
from .probe import Display, Prober
from .recovery import CommandRecovery, RecoveryTrigger
from .transport.base import Connector
from .transport.poller import Poller
from .watchdog import Watchdog


class NetCheck:
    """
    Convenience wrapper that builds the probe and the watchdog from one settings object.

    Collaborators (connector, poller, recovery, sleep) can be injected so the
    whole loop runs without sockets or a real reboot.
    """

    def __init__(
        self,
        settings: WatchdogSettings | None = None,
        *,
        connector: Connector | None = None,
        poller: Poller | None = None,
        recovery: RecoveryTrigger | None = None,
        display: Display | None = None,
        sleep: Callable[[float], object] | None = None,
    ):
        self.settings = (settings or load_settings()).validate()
        self.prober = Prober(
            self.settings.to_target(),
            self.settings.to_probe_parameters(),
            connector=connector,
            poller=poller,
            display=display,
        )
        self.recovery = recovery or CommandRecovery(self.settings.recovery_command)
        self.watchdog = Watchdog(
            self._probe_ok,
            self.recovery,
            threshold=self.settings.failures,
            wait=self.settings.effective_wait,
            sleep=sleep,
        )
        self.last_result: ProbeResult | None = None

    def _probe_ok(self) -> bool:
        self.last_result = self.prober.probe()
        return self.last_result.ok

    def probe_once(self) -> ProbeResult:
        self.last_result = self.prober.probe()
        return self.last_result

    def run(self) -> int:
        """Run the watchdog; return the process exit status."""
        outcome = self.watchdog.run()
        return 0 if outcome else 1

    def stop(self) -> None:
        self.watchdog.stop()

    def __enter__(self) -> NetCheck:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.stop()
