"""Access to the CI job: inputs, secret masking and exported variables."""

from __future__ import annotations

import logging
import os
import sys
import uuid
from enum import Enum
from pathlib import Path
from typing import Iterable, MutableMapping, Protocol, TextIO

from oauthrefresh.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_FILE_VAR = "GITHUB_ENV"


class ExportStyle(str, Enum):
    """Line format used when appending to the job environment file."""

    LINE = "line"
    DELIMITED = "delimited"


class CIEnvironment(Protocol):
    """What a refresh run needs from the surrounding CI job."""

    def get_env(self, name: str) -> str | None: ...

    def get_input(self, name: str) -> str | None: ...

    def mask(self, value: str) -> None: ...

    def export(self, name: str, value: str) -> None: ...

    def export_many(self, entries: Iterable[tuple[str, str]]) -> None: ...


def _input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def escape_command_data(value: str) -> str:
    """Escape a workflow command argument so it stays on one line."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def format_env_entry(name: str, value: str, style: ExportStyle, delimiter: str | None = None) -> str:
    """Render one environment file entry."""
    if style is ExportStyle.LINE:
        if not name or "=" in name or any(c in name + value for c in "\r\n"):
            raise ConfigurationError(f"Cannot write {name!r} as a single NAME=value line")
        return f"{name}={value}\n"

    delimiter = delimiter or f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name:
        raise ConfigurationError(f"Variable name {name!r} contains the delimiter")
    if delimiter in value:
        raise ConfigurationError(f"Value of {name!r} contains the delimiter")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


class GitHubActionsEnvironment:
    """GitHub Actions workflow commands and environment files."""

    def __init__(
        self,
        environ: MutableMapping[str, str] | None = None,
        export_style: ExportStyle = ExportStyle.LINE,
        stream: TextIO | None = None,
    ):
        self.environ = os.environ if environ is None else environ
        self.export_style = export_style
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def get_env(self, name: str) -> str | None:
        return self.environ.get(name)

    def get_input(self, name: str) -> str | None:
        """Read an action input the way the Actions toolkit does (trimmed)."""
        value = self.environ.get(_input_env_name(name))
        if value is None:
            return None
        return value.strip()

    def mask(self, value: str) -> None:
        """Register a value with the log redactor."""
        if not value:
            return
        self.stream.write(f"::add-mask::{escape_command_data(value)}\n")
        self.stream.flush()

    def export(self, name: str, value: str) -> None:
        """Make ``name`` visible to this process and to later job steps."""
        self.export_many([(name, value)])

    def export_many(self, entries: Iterable[tuple[str, str]]) -> None:
        """Export several variables in one append; nothing is exported if any entry is invalid."""
        entries = list(entries)
        rendered = "".join(format_env_entry(name, value, self.export_style) for name, value in entries)
        names = ", ".join(name for name, _ in entries)

        env_file = self.environ.get(ENV_FILE_VAR)
        if env_file:
            try:
                with Path(env_file).open("a", encoding="utf-8") as fp:
                    fp.write(rendered)
            except OSError as exc:
                raise ConfigurationError(f"Cannot write {ENV_FILE_VAR} file {env_file}: {exc}") from exc
            logger.debug("Exported %s to %s", names, env_file)
        else:
            logger.warning("%s is not set; %s only visible to this process", ENV_FILE_VAR, names)

        for name, value in entries:
            self.environ[name] = value
