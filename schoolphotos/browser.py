from typing import Optional

from playwright.async_api import async_playwright
# Async Playwright API; every page interaction below is awaited.


CHROME_ARGS = [
    "--disable-blink-features=AutomationControlled",
    # Keeps navigator.webdriver unset so the school portal serves the normal UI.

    "--no-sandbox",
    "--disable-dev-shm-usage",
    # Both needed when Chromium runs inside a container.
]


UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/133.0.0.0 Safari/537.36"
)
# Shared with the download session so media requests look like the page's own.


async def open_page(headless: bool = False, storage_state: Optional[str] = None):
    """
    Start Playwright and open one Chromium page for the whole run.

    Headed by default: the first run needs a human to log in.
    Returns (pw, browser, context, page); pass the first three to close_page.
    """
    pw = await async_playwright().start()

    browser = await pw.chromium.launch(headless=headless, args=CHROME_ARGS)

    context = await browser.new_context(
        storage_state=storage_state if storage_state else None,
        # Saved cookies/localStorage from save_session.py skip the manual login.

        user_agent=UA,

        viewport={"width": 1366, "height": 900},
        # Below ~800px the portal switches to its mobile layout and the lightbox differs.
    )

    page = await context.new_page()
    return pw, browser, context, page


async def close_page(pw, browser, context):
    await context.close()
    await browser.close()
    await pw.stop()


async def cookie_header(context) -> str:
    """Cookies of the live session, formatted for an HTTP Cookie header."""
    cookies = await context.cookies()
    return "; ".join(f"{c['name']}={c['value']}" for c in cookies)
