# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class SentNotice:
    title: str
    description: str
    variant: str


@dataclass(slots=True)
class FakeNotifier:
    """
    Notifier that records every notice for assertions.
    """

    sent: list[SentNotice] = field(default_factory=list)

    def notify(self, title: str, description: str = "", *, variant: str = "default") -> None:
        self.sent.append(SentNotice(title=title, description=description, variant=variant))

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.sent]

    @property
    def errors(self) -> list[SentNotice]:
        return [n for n in self.sent if n.variant == "destructive"]
