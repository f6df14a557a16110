"""Browser session management"""

from playwright.sync_api import sync_playwright

import one_click_apply.config as config

USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"


def launch_browser(headless=None):
    """
    Launch persistent browser context and return (playwright, context, page).
    Reuses login session across runs.
    """
    print("Launching browser...")

    p = sync_playwright().start()

    context = p.chromium.launch_persistent_context(
        user_data_dir=config.BROWSER_DATA_DIR,
        headless=config.HEADLESS if headless is None else headless,
        args=[
            "--disable-blink-features=AutomationControlled",
            "--disable-features=site-per-process"
        ],
        user_agent=USER_AGENT,
    )

    page = context.pages[0] if context.pages else context.new_page()

    return p, context, page


def close_browser(p, context):
    context.close()
    p.stop()
