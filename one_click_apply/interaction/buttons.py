"""Button interactions - the browser side of an application"""

from playwright.sync_api import Error as PlaywrightError

from one_click_apply.utils.timing import human_delay

APPLY_BUTTON_TEXT = "1-Click Apply"

APPLIED_MARKERS = [
    "Applied",
    "Application submitted",
    "You applied",
    "View application",
]

# Full sentences only; a bare "Applied" in page text is too ambiguous
PAGE_TEXT_MARKERS = [
    "You applied to this job",
    "Application submitted",
]


class PlaywrightBrowser:
    """
    Browser collaborator for the orchestrator.

    Knows how to load a job page, read its text and click its apply button.
    The interview engine only sees these methods.
    """

    def __init__(self, page):
        self.page = page

    def open_job(self, job):
        """Navigate to the posting. Returns False when the page never loaded."""
        print(f"Navigating to {job.url}...")
        try:
            self.page.goto(job.url, wait_until="domcontentloaded", timeout=30000)
        except PlaywrightError as e:
            print(f"  ❌ Could not load job page: {e}")
            return False
        human_delay(2000, 3500)
        return True

    def page_text(self):
        try:
            return self.page.inner_text("body")
        except PlaywrightError as e:
            print(f"  ⚠️ Could not read page text: {e}")
            return ""

    def is_already_applied(self):
        """
        Pre-flight check: detect if job has already been applied to.

        Must run BEFORE clicking apply. Checks the apply button text first,
        then full-sentence markers in the page text. A stray "Applied"
        elsewhere on the page does not count.

        Returns: (bool, str) - (is_applied, reason)
        """
        try:
            buttons = self.page.locator('button:has-text("Applied"), a:has-text("View application")')
            if buttons.count() > 0:
                text = buttons.first.inner_text().strip()
                for marker in APPLIED_MARKERS:
                    if marker in text and APPLY_BUTTON_TEXT not in text:
                        return (True, f"button_text: {text}")
        except PlaywrightError as e:
            print(f"  ⚠️ Already-applied check failed: {e}")

        text = self.page_text()
        for marker in PAGE_TEXT_MARKERS:
            if marker in text:
                return (True, f"page_text: {marker}")

        # If uncertain, proceed normally (never block valid applications)
        return (False, "")

    def _find_apply_button(self, job):
        page = self.page

        # Strategy 1: any visible apply button (job detail page)
        buttons = page.locator(f'button:has-text("{APPLY_BUTTON_TEXT}")')
        for i in range(buttons.count()):
            button = buttons.nth(i)
            if button.is_visible():
                print("  Found 1-Click Apply button on job detail page")
                return button

        # Strategy 2: job card by listing key (search results page)
        card_button = page.locator(
            f'[data-listing-key="{job.listing_key}"] button:has-text("{APPLY_BUTTON_TEXT}")'
        )
        if card_button.count() > 0:
            print("  Found button via job card data-listing-key")
            return card_button.first

        # Strategy 3: job card by title (search results page)
        if job.title:
            cards = page.locator('article, .job_result, [role="article"]')
            title_prefix = job.title[:30]
            for i in range(cards.count()):
                card = cards.nth(i)
                if title_prefix in (card.text_content() or ""):
                    button = card.locator(f'button:has-text("{APPLY_BUTTON_TEXT}")')
                    if button.count() > 0 and button.first.is_visible():
                        print("  Found button via job card title match")
                        return button.first

        return None

    def activate_entry_point(self, job):
        """
        Click the apply button for this job.

        The interview endpoint answers 404 until this click has initialized
        the application session, so a missing button ends the job.
        """
        try:
            button = self._find_apply_button(job)
            if button is None:
                print(f"  ⚠️ No {APPLY_BUTTON_TEXT} button found on page")
                return False

            if button.is_disabled():
                print(f"  ⚠️ '{APPLY_BUTTON_TEXT}' button found but DISABLED")
                return False

            button.click()
            human_delay(1500, 2500)
            print(f"  ✓ Activated '{APPLY_BUTTON_TEXT}' button")
            return True
        except PlaywrightError as e:
            print(f"  ⚠️ Error activating '{APPLY_BUTTON_TEXT}': {e}")
            return False
