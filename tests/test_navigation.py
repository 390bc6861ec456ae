"""NavigationHistory tests — push/pop, replace and the LANDING fallback."""

import pytest

from leak_intake.navigation import NavigationHistory, Screen


@pytest.fixture
def nav():
    return NavigationHistory()


def test_starts_on_landing(nav):
    assert nav.screen is Screen.LANDING
    assert nav.depth == 0


def test_navigate_then_back_restores(nav):
    nav.navigate_to(Screen.WIZARD)
    nav.navigate_to(Screen.CONSULTATION)
    assert nav.depth == 2
    assert nav.go_back() is Screen.WIZARD
    assert nav.go_back() is Screen.LANDING


def test_back_on_empty_stack_falls_back_to_landing(nav):
    nav.replace(Screen.ADMIN_DASHBOARD)
    assert nav.go_back() is Screen.LANDING
    assert nav.depth == 0


def test_replace_does_not_push(nav):
    nav.navigate_to(Screen.WIZARD)
    nav.navigate_to(Screen.LOADING)
    nav.replace(Screen.RESULT)
    assert nav.screen is Screen.RESULT
    # Back from the report returns to the wizard, not the loading screen
    assert nav.go_back() is Screen.WIZARD


def test_every_transition_bumps_scroll_epoch(nav):
    nav.navigate_to(Screen.WIZARD)
    nav.replace(Screen.LOADING)
    nav.go_back()
    assert nav.scroll_epoch == 3


def test_accepts_screen_names(nav):
    nav.navigate_to("INSURANCE_GUIDE")
    assert nav.state().screen == "INSURANCE_GUIDE"
    with pytest.raises(ValueError):
        nav.navigate_to("NOWHERE")
