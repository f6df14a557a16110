#!/usr/bin/env python3
"""
ZipRecruiter Login Helper
Opens the bot's browser and waits for you to log into ZipRecruiter.
Press Ctrl+C when done to save the session.
"""

import sys

from one_click_apply.browser.session import close_browser, launch_browser
import one_click_apply.config as config

LOGIN_URL = "https://www.ziprecruiter.com/authentication/login"


def main():
    print("Opening browser for ZipRecruiter login...")
    print("=" * 50)
    print("Instructions:")
    print("1. Log into ZipRecruiter in the browser that opens")
    print("2. Open a job posting with a 1-Click Apply button to verify access")
    print("3. Press Ctrl+C in this terminal when ready")
    print(f"4. Your session is saved in {config.BROWSER_DATA_DIR} for future bot runs")
    print("=" * 50)

    p, context, page = launch_browser(headless=False)
    try:
        print("\nNavigating to ZipRecruiter...")
        page.goto(LOGIN_URL)
        print("\n✓ Browser is open. Press Ctrl+C here once you are logged in.\n")

        # Wait indefinitely until user presses Ctrl+C
        page.wait_for_timeout(1000000000)  # ~11 days
    except KeyboardInterrupt:
        print("\n\n✓ Session saved! You can now run the bot.")
        print("Run: python -m one_click_apply.main \"<job_url>\"\n")
        return 0
    except Exception as e:
        print(f"\n✗ Error: {e}\n")
        return 1
    finally:
        close_browser(p, context)
    return 0


if __name__ == "__main__":
    sys.exit(main())
