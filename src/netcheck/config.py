# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for netcheck."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigError, ProbeError
from .version import __version__

DEFAULT_USER_AGENT = f"netcheck/{__version__}"
DEFAULT_RECOVERY_COMMAND = "/sbin/reboot"
DEFAULT_HTTP_PORT = 80
DEFAULT_HTTPS_PORT = 443


def _int_env(name: str, default: int | None) -> int | None:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ConnectionTarget:
    """Where a probe connects."""

    host: str
    port: int = DEFAULT_HTTP_PORT
    use_tls: bool = False
    timeout: int = 60
    verify_tls: bool = True


@dataclass(frozen=True)
class ProbeParameters:
    """What a probe asks for and expects back."""

    pattern: str
    timeout: int = 60
    show_raw: bool = False
    path: str = "/"
    user_agent: str = DEFAULT_USER_AGENT
    send_accept: bool = True


@dataclass
class WatchdogSettings:
    """Watchdog configuration; one instance per process."""

    host: str = ""
    port: int | None = None
    use_tls: bool = False
    verify_tls: bool = True
    timeout: int = 60
    wait: int | None = None
    failures: int = 60
    pattern: str = ""
    path: str = "/"
    user_agent: str = DEFAULT_USER_AGENT
    show_raw: bool = False
    recovery_command: str = DEFAULT_RECOVERY_COMMAND
    verbose: bool = False

    @classmethod
    def from_env(cls) -> WatchdogSettings:
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            host=os.getenv("NETCHECK_HOST", cls.host),
            port=_int_env("NETCHECK_PORT", cls.port),
            use_tls=_bool_env("NETCHECK_TLS", cls.use_tls),
            verify_tls=_bool_env("NETCHECK_VERIFY_TLS", cls.verify_tls),
            timeout=_int_env("NETCHECK_TIMEOUT", cls.timeout),
            wait=_int_env("NETCHECK_WAIT", cls.wait),
            failures=_int_env("NETCHECK_FAILURES", cls.failures),
            pattern=os.getenv("NETCHECK_PATTERN", cls.pattern),
            path=os.getenv("NETCHECK_PATH", cls.path),
            user_agent=os.getenv("NETCHECK_USER_AGENT", cls.user_agent),
            show_raw=_bool_env("NETCHECK_SHOW_RAW", cls.show_raw),
            recovery_command=os.getenv("NETCHECK_RECOVERY_COMMAND", cls.recovery_command),
            verbose=_bool_env("NETCHECK_VERBOSE", cls.verbose),
        )

    @property
    def effective_port(self) -> int:
        if self.port is not None:
            return self.port
        return DEFAULT_HTTPS_PORT if self.use_tls else DEFAULT_HTTP_PORT

    @property
    def effective_wait(self) -> int:
        # The wait between probes defaults to the I/O timeout.
        return self.wait if self.wait is not None else self.timeout

    def validate(self) -> WatchdogSettings:
        """Check every field once; raise ConfigError on the first problem."""
        if not self.host or not self.host.strip():
            raise ConfigError("You must provide a hostname.")
        if not self.pattern:
            raise ConfigError("You must provide a string to look for.")
        if not 1 <= self.effective_port <= 65535:
            raise ConfigError(f"Invalid port: {self.effective_port}")
        if self.timeout < 1:
            raise ConfigError(f"Invalid timeout value: {self.timeout}")
        if self.effective_wait < 1:
            raise ConfigError(f"Invalid wait value: {self.effective_wait}")
        if self.failures < 1:
            raise ConfigError(f"Invalid failures value: {self.failures}")
        if not self.path.startswith("/"):
            raise ConfigError(f"Request path must start with '/': {self.path!r}")
        if any(ch in self.path for ch in " \r\n"):
            raise ConfigError(f"Request path must not contain whitespace: {self.path!r}")
        if not self.recovery_command or not self.recovery_command.strip():
            raise ConfigError("Recovery command must not be empty.")

        from .http.request import build_get_request

        try:
            build_get_request(self.host.strip(), self.path, user_agent=self.user_agent)
        except ProbeError as exc:
            raise ConfigError(exc.message) from exc
        return self

    def to_target(self) -> ConnectionTarget:
        return ConnectionTarget(
            host=self.host.strip(),
            port=self.effective_port,
            use_tls=self.use_tls,
            timeout=self.timeout,
            verify_tls=self.verify_tls,
        )

    def to_probe_parameters(self) -> ProbeParameters:
        return ProbeParameters(
            pattern=self.pattern,
            timeout=self.timeout,
            show_raw=self.show_raw,
            path=self.path,
            user_agent=self.user_agent,
        )


def load_settings() -> WatchdogSettings:
    """Load watchdog settings from environment with sensible defaults."""
    return WatchdogSettings.from_env()
