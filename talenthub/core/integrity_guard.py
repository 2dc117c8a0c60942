"""
Interview integrity guard

A finite-state machine observing page visibility and navigation while a
candidate answers interview questions. It detects and discloses tab switches,
it does not prevent them.

States::

    inactive --activate--> active_unwarned
    active_*        --visibility hidden--> active_warned   (on_tab_switch fired)
    active_*        --navigation attempt-> active_warned   (neutral history state pushed)
    active_warned   --acknowledge-------> active_unwarned
    active_*        --deactivate--------> inactive
"""
import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

TRANSITION_HISTORY = 50


class GuardState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE_UNWARNED = "active_unwarned"
    ACTIVE_WARNED = "active_warned"


class GuardEvent(str, Enum):
    ACTIVATE = "activate"
    VISIBILITY_HIDDEN = "visibility_hidden"
    NAVIGATION_ATTEMPT = "navigation_attempt"
    ACKNOWLEDGE = "acknowledge"
    UNLOAD_ATTEMPT = "unload_attempt"
    DEACTIVATE = "deactivate"


class HistoryPort(Protocol):
    """Browser history operations the guard needs"""

    def push_state(self) -> None: ...


class IntegrityGuard:
    def __init__(self, on_tab_switch: Callable[[], None], history: Optional[HistoryPort] = None):
        self.on_tab_switch = on_tab_switch
        self.history = history
        self.state = GuardState.INACTIVE
        # Most recent transitions only
        self.transitions: Deque[Tuple[GuardEvent, GuardState, GuardState]] = deque(maxlen=TRANSITION_HISTORY)

    @property
    def active(self) -> bool:
        return self.state is not GuardState.INACTIVE

    @property
    def warning_visible(self) -> bool:
        return self.state is GuardState.ACTIVE_WARNED

    def _move(self, event: GuardEvent, target: GuardState):
        source = self.state
        self.state = target
        self.transitions.append((event, source, target))
        logger.debug(f"Guard {event.value}: {source.value} -> {target.value}")

    def activate(self):
        """Interview started"""
        if self.active:
            return
        self._move(GuardEvent.ACTIVATE, GuardState.ACTIVE_UNWARNED)
        # Seed an entry so the first back press lands on this page
        if self.history is not None:
            self.history.push_state()

    def deactivate(self):
        """Interview submitted or abandoned; later events are ignored"""
        if not self.active:
            return
        self._move(GuardEvent.DEACTIVATE, GuardState.INACTIVE)

    def visibility_changed(self, hidden: bool):
        if not self.active or not hidden:
            return
        self._move(GuardEvent.VISIBILITY_HIDDEN, GuardState.ACTIVE_WARNED)
        self.on_tab_switch()

    def navigation_attempted(self):
        """Back/forward navigation, nullified by pushing a neutral state"""
        if not self.active:
            return
        if self.history is not None:
            self.history.push_state()
        self._move(GuardEvent.NAVIGATION_ATTEMPT, GuardState.ACTIVE_WARNED)

    def acknowledge(self):
        """Candidate pressed "Continue Application" """
        if self.state is not GuardState.ACTIVE_WARNED:
            return
        self._move(GuardEvent.ACKNOWLEDGE, GuardState.ACTIVE_UNWARNED)

    def before_unload(self) -> bool:
        """True when the unload should be intercepted with a confirmation prompt"""
        if not self.active:
            return False
        self.transitions.append((GuardEvent.UNLOAD_ATTEMPT, self.state, self.state))
        return True

    def dispatch(self, event: GuardEvent):
        """Feed a discrete event; returns the unload decision for UNLOAD_ATTEMPT"""
        if event is GuardEvent.ACTIVATE:
            self.activate()
        elif event is GuardEvent.VISIBILITY_HIDDEN:
            self.visibility_changed(True)
        elif event is GuardEvent.NAVIGATION_ATTEMPT:
            self.navigation_attempted()
        elif event is GuardEvent.ACKNOWLEDGE:
            self.acknowledge()
        elif event is GuardEvent.UNLOAD_ATTEMPT:
            return self.before_unload()
        elif event is GuardEvent.DEACTIVATE:
            self.deactivate()
        return None
