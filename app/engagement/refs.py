"""Opaque references to users and content owned by the collaborators."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRef:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ContentRef:
    value: str

    def __str__(self) -> str:
        return self.value
