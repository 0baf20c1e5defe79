"""
Cart notices.

The cart reports failures through exactly five notice kinds. Sinks are
fire-and-forget: CartStore never lets a sink error escape an operation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol

from rocketcart.i18n import DEFAULT_LANGUAGE, get_text
from rocketcart.logging import get_logger

logger = get_logger(__name__)


class NoticeKind(str, Enum):
    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_STOCK = "insufficient_stock"
    UPDATE_FAILED = "update_failed"
    REMOVE_FAILED = "remove_failed"  # also covers "product not in cart"
    ADD_FAILED = "add_failed"


@dataclass(frozen=True)
class Notice:
    """Human-readable failure notice."""
    kind: NoticeKind
    message: str

    @classmethod
    def build(cls, kind: NoticeKind, lang: str = DEFAULT_LANGUAGE) -> "Notice":
        return cls(kind=kind, message=get_text(f"cart.{kind.value}", lang))


class NotificationSink(Protocol):
    def notify(self, notice: Notice) -> None:
        ...


class LoggingNotifier:
    """Default sink: writes notices to the log."""

    def notify(self, notice: Notice) -> None:
        logger.warning(f"Cart notice [{notice.kind.value}]: {notice.message}")


class CollectingNotifier:
    """Keeps every notice in order (tests, UI polling)."""

    def __init__(self) -> None:
        self.notices: List[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def kinds(self) -> List[NoticeKind]:
        return [notice.kind for notice in self.notices]

    def clear(self) -> None:
        self.notices.clear()
