"""Screen-level back-stack, independent of the wizard's step sequencer."""

from __future__ import annotations

import enum
import logging

from leak_intake.models.session import NavigationState

logger = logging.getLogger(__name__)


class Screen(str, enum.Enum):
    LANDING = "LANDING"
    WIZARD = "WIZARD"
    LOADING = "LOADING"
    RESULT = "RESULT"
    CONSULTATION = "CONSULTATION"
    SERVICE_GUIDE = "SERVICE_GUIDE"
    INSURANCE_GUIDE = "INSURANCE_GUIDE"
    ADMIN_LOGIN = "ADMIN_LOGIN"
    ADMIN_DASHBOARD = "ADMIN_DASHBOARD"


# Screens a client may open directly; the rest are reached through their
# own actions (start, analysis, login).
USER_SCREENS = frozenset({
    Screen.LANDING,
    Screen.CONSULTATION,
    Screen.SERVICE_GUIDE,
    Screen.INSURANCE_GUIDE,
    Screen.ADMIN_LOGIN,
})


class NavigationHistory:
    """Push/pop stack of screens.

    Every transition bumps ``scroll_epoch``; clients scroll to the top when
    it changes.
    """

    def __init__(self, start: Screen = Screen.LANDING) -> None:
        self._screen = start
        self._stack: list[Screen] = []
        self.scroll_epoch = 0

    @property
    def screen(self) -> Screen:
        return self._screen

    @property
    def depth(self) -> int:
        return len(self._stack)

    def navigate_to(self, screen: Screen | str) -> Screen:
        """Push the current screen, then switch."""
        screen = Screen(screen)
        self._stack.append(self._screen)
        self._switch(screen)
        return screen

    def replace(self, screen: Screen | str) -> Screen:
        """Switch without pushing (LOADING -> RESULT and the like)."""
        screen = Screen(screen)
        self._switch(screen)
        return screen

    def go_back(self) -> Screen:
        """Pop and restore the previous screen, or fall back to LANDING."""
        previous = self._stack.pop() if self._stack else Screen.LANDING
        self._switch(previous)
        return previous

    def reset(self) -> None:
        self._stack.clear()
        self._switch(Screen.LANDING)

    def state(self) -> NavigationState:
        return NavigationState(
            screen=self._screen.value,
            depth=len(self._stack),
            scroll_epoch=self.scroll_epoch,
        )

    def _switch(self, screen: Screen) -> None:
        logger.debug("Screen %s -> %s", self._screen.value, screen.value)
        self._screen = screen
        self.scroll_epoch += 1
