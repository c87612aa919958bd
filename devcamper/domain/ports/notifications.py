from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class EmailMessage:
    to: str
    subject: str
    body: str


class Notifier(Protocol):
    """Delivers messages to users. Raises ``DeliveryFailed`` when delivery fails."""

    def send(self, message: EmailMessage) -> None:
        ...
