import argparse
import asyncio

from playwright.async_api import async_playwright

from schoolphotos.browser import CHROME_ARGS, UA
from schoolphotos.adapters.socialschools import SocialSchoolsAdapter


async def save_session(path: str = "auth.json"):
    """
    Opens a browser for manual login and saves the authentication state.
    Pass the file to runner.py --storage-state to skip the login next time.
    """
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=False, args=CHROME_ARGS)
        context = await browser.new_context(user_agent=UA)
        page = await context.new_page()

        print("Navigating to Social Schools...")
        await page.goto(SocialSchoolsAdapter.login_url)

        print("\n[ACTION REQUIRED]: Please log in manually in the browser window.")
        input("\nPress Enter here AFTER you see the dashboard...")

        await context.storage_state(path=path)
        print(f"\n[SUCCESS]: Session saved to '{path}'.")

        await browser.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Save a logged-in Social Schools browser session")
    parser.add_argument("--out", default="auth.json", help="storage_state output path")
    asyncio.run(save_session(parser.parse_args().out))
