"""Lifecycle, client and notification entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LifecycleState(str, Enum):
    """States of the lifecycle controller, in transition order."""

    INSTALLING = "installing"
    WAITING = "waiting"
    ACTIVATING = "activating"
    ACTIVE = "active"


@dataclass(frozen=True)
class ClearResult:
    """Outcome of a clear-all command."""

    success: bool
    message: str | None = None
    error: str | None = None
    deleted: tuple[str, ...] = ()


@dataclass(frozen=True)
class NotificationAction:
    action: str
    title: str
    icon: str | None = None


@dataclass(frozen=True)
class Notification:
    """A notification shown to the user.

    Attributes:
        title: Notification title
        body: Notification text
        icon: Icon URL
        badge: Badge URL
        tag: Tag used to replace or close the notification
        require_interaction: Whether it stays until the user acts
        actions: Buttons offered with the notification
    """

    title: str
    body: str
    icon: str | None = None
    badge: str | None = None
    tag: str | None = None
    require_interaction: bool = False
    actions: tuple[NotificationAction, ...] = ()


@dataclass
class Client:
    """A connected page controlled by the interception layer."""

    id: str
    url: str
    type: str = "window"
    focused: bool = False
    messages: list[dict[str, Any]] = field(default_factory=list)
