"""Test the Playwright browser collaborator against a fake page"""

import pytest

import one_click_apply.interaction.buttons as buttons
from one_click_apply.data.models import Job
from one_click_apply.interaction.buttons import APPLY_BUTTON_TEXT, PlaywrightBrowser

APPLY_SELECTOR = f'button:has-text("{APPLY_BUTTON_TEXT}")'
APPLIED_SELECTOR = 'button:has-text("Applied"), a:has-text("View application")'

JOB = Job(job_id="j1", url="https://example.test/j1?lk=LK1", listing_key="LK1", title="Backend Engineer")


class FakeElement:
    def __init__(self, text="", visible=True, disabled=False, children=None):
        self.text = text
        self.visible = visible
        self.disabled = disabled
        self.children = children or {}
        self.clicked = False

    def inner_text(self):
        return self.text

    def text_content(self):
        return self.text

    def is_visible(self):
        return self.visible

    def is_disabled(self):
        return self.disabled

    def click(self):
        self.clicked = True

    def locator(self, selector):
        return FakeLocator(self.children.get(selector, []))


class FakeLocator:
    def __init__(self, elements):
        self.elements = elements

    def count(self):
        return len(self.elements)

    def nth(self, i):
        return self.elements[i]

    @property
    def first(self):
        return self.elements[0]


class FakePage:
    def __init__(self, selectors=None, body=""):
        self.selectors = selectors or {}
        self.body = body

    def locator(self, selector):
        return FakeLocator(self.selectors.get(selector, []))

    def inner_text(self, selector):
        return self.body


@pytest.fixture(autouse=True)
def no_delays(monkeypatch):
    monkeypatch.setattr(buttons, "human_delay", lambda *args, **kwargs: None)


# ========== Already applied ==========

def test_applied_button_detected():
    page = FakePage({APPLIED_SELECTOR: [FakeElement("Applied")]})
    applied, reason = PlaywrightBrowser(page).is_already_applied()
    assert applied is True
    assert reason == "button_text: Applied"


def test_page_text_sentence_detected():
    page = FakePage(body="Backend Engineer\nYou applied to this job 3 days ago")
    applied, reason = PlaywrightBrowser(page).is_already_applied()
    assert applied is True
    assert reason.startswith("page_text:")


def test_stray_applied_word_ignored():
    page = FakePage(body="Applied Materials is hiring")
    assert PlaywrightBrowser(page).is_already_applied() == (False, "")


# ========== Apply button ==========

def test_visible_apply_button_clicked():
    hidden = FakeElement(APPLY_BUTTON_TEXT, visible=False)
    visible = FakeElement(APPLY_BUTTON_TEXT)
    page = FakePage({APPLY_SELECTOR: [hidden, visible]})

    assert PlaywrightBrowser(page).activate_entry_point(JOB) is True
    assert visible.clicked is True
    assert hidden.clicked is False


def test_apply_button_found_by_listing_key():
    card_button = FakeElement(APPLY_BUTTON_TEXT)
    selector = f'[data-listing-key="LK1"] {APPLY_SELECTOR}'
    page = FakePage({selector: [card_button]})

    assert PlaywrightBrowser(page).activate_entry_point(JOB) is True
    assert card_button.clicked is True


def test_apply_button_found_by_title():
    card_button = FakeElement(APPLY_BUTTON_TEXT)
    card = FakeElement("Backend Engineer - Acme - Remote", children={APPLY_SELECTOR: [card_button]})
    page = FakePage({'article, .job_result, [role="article"]': [card]})

    assert PlaywrightBrowser(page).activate_entry_point(JOB) is True
    assert card_button.clicked is True


def test_disabled_apply_button_not_clicked():
    button = FakeElement(APPLY_BUTTON_TEXT, disabled=True)
    page = FakePage({APPLY_SELECTOR: [button]})

    assert PlaywrightBrowser(page).activate_entry_point(JOB) is False
    assert button.clicked is False


def test_no_apply_button():
    assert PlaywrightBrowser(FakePage()).activate_entry_point(JOB) is False
