"""Structured results of setup and status checks."""

from typing import Literal

from pydantic import BaseModel, Field


class StatusEntry(BaseModel):
    """A single line of a status report."""

    level: Literal["notice", "error"]
    message: str
    title: str | None = None


class StorageStatus(BaseModel):
    """Outcome of a setup or status check.

    Connectivity problems are reported as error entries instead of being
    raised, so a status check always produces a report.

    Examples:
        >>> status = storage.status()
        >>> if status.has_errors:
        ...     for entry in status.errors:
        ...         print(entry.message)
    """

    entries: list[StatusEntry] = Field(default_factory=list)

    def add_notice(self, message: str, title: str | None = None) -> None:
        self.entries.append(StatusEntry(level="notice", message=message, title=title))

    def add_error(self, message: str, title: str | None = None) -> None:
        self.entries.append(StatusEntry(level="error", message=message, title=title))

    @property
    def notices(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.level == "notice"]

    @property
    def errors(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.level == "error"]

    @property
    def has_errors(self) -> bool:
        return any(e.level == "error" for e in self.entries)
