import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from playwright.async_api import TimeoutError as PWTimeoutError
from playwright._impl._errors import TargetClosedError

from schoolphotos.browser import close_page, cookie_header, open_page
from schoolphotos.adapters.base import PostDescriptor, SiteAdapter
from schoolphotos.adapters.socialschools import SocialSchoolsAdapter
from schoolphotos.errors import LoginError
from schoolphotos.utils.carousel import DEFAULT_TIMEOUT_MS, MAX_ITEMS, walk_carousel
from schoolphotos.utils.download import download_post, open_http_session


# Registered locator strategies, matched against the post URL's host.
ADAPTERS: list[SiteAdapter] = [
    SocialSchoolsAdapter(),
]

LOGIN_TIMEOUT_MS = 5 * 60 * 1000   # A human is typing a password.


def pick_adapter(url: str, post_marker: Optional[str] = None) -> SiteAdapter:
    """
    Select the adapter whose domain appears in the URL's host.

    `post_marker` swaps the post-body selector (archived posts use a
    different wrapper) without touching the walk itself.
    """
    host = urlparse(url).netloc.lower()
    for a in ADAPTERS:
        if any(d in host for d in a.domains):
            return type(a)(post_marker=post_marker) if post_marker else a
    raise ValueError(f"No adapter registered for host: {host}")


@dataclass
class Failure:
    post: PostDescriptor
    phase: str                      # "scrape" or "download"
    error: BaseException

    def __str__(self) -> str:
        return f"[{self.phase}] {self.post.label()}: {self.error}"


@dataclass
class RunReport:
    posts: List[PostDescriptor] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)
    downloaded: int = 0

    @property
    def media_count(self) -> int:
        return sum(len(p.media_sources) for p in self.posts)


async def login(page, adapter: SiteAdapter, timeout_ms: int = LOGIN_TIMEOUT_MS):
    await page.goto(adapter.login_url, wait_until="domcontentloaded")
    print("[ACTION REQUIRED] Log in in the browser window if the portal asks for it.")
    try:
        await adapter.wait_logged_in(page, timeout_ms)
    except PWTimeoutError as e:
        raise LoginError(f"Not logged in to {adapter.login_url} after {timeout_ms} ms") from e
    print(f"[OK] Logged in to {adapter.name}.")


async def scrape_posts(
    page,
    posts: Sequence[PostDescriptor],
    adapter: SiteAdapter,
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    max_items: int = MAX_ITEMS,
) -> Tuple[List[PostDescriptor], List[Failure]]:
    """
    Phase one: walk every post's carousel, one post at a time.

    Returns the posts with their media attached (unchanged when the walk
    failed) and one Failure per post that raised.
    """
    scraped: List[PostDescriptor] = []
    failures: List[Failure] = []

    for post in posts:
        try:
            sources = await walk_carousel(
                page, post, adapter, timeout_ms=timeout_ms, max_items=max_items
            )
            scraped.append(post.with_media(sources))
        except TargetClosedError:
            raise
        except Exception as e:
            print(f"[ERR ] Scraping failed for {post.label()}: {e}")
            failures.append(Failure(post, "scrape", e))
            scraped.append(post)

    return scraped, failures


async def download_posts(
    posts: Sequence[PostDescriptor],
    out_dir,
    *,
    cookies: Optional[str] = None,
    set_exif: bool = True,
) -> Tuple[int, List[Failure]]:
    """Phase two: download what phase one found. Returns (files saved, failures)."""
    saved = 0
    failures: List[Failure] = []

    async with open_http_session(cookies) as session:
        for post in posts:
            if not post.media_sources:
                continue
            try:
                paths = await download_post(session, post, out_dir, set_exif=set_exif)
                saved += len(paths)
            except Exception as e:
                print(f"[ERR ] Download failed for {post.label()}: {e}")
                failures.append(Failure(post, "download", e))

    return saved, failures


async def wait_for_ack(prompt: str = "Press Enter to close the browser..."):
    # input() blocks; keep the event loop free while the human looks around.
    try:
        await asyncio.to_thread(input, prompt)
    except EOFError:
        pass


async def crawl_posts(
    posts: Sequence[PostDescriptor],
    out_dir,
    *,
    headless: bool = False,
    storage_state: Optional[str] = None,
    post_marker: Optional[str] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    login_timeout_ms: int = LOGIN_TIMEOUT_MS,
    max_items: int = MAX_ITEMS,
    download: bool = True,
    set_exif: bool = True,
    wait_before_close: bool = True,
) -> RunReport:
    """
    One full run:
        1. Open a browser and wait for the portal login.
        2. Scrape every post (per-post failures are logged and skipped).
        3. Download every post's media with the session cookies.
        4. Wait for the user before the browser is closed.
    Errors outside the per-post loops propagate to the caller.
    """
    report = RunReport(posts=list(posts))
    if not posts:
        print("[DONE] No posts to process.")
        return report

    adapter = pick_adapter(posts[0].href, post_marker)

    pw, browser, context, page = await open_page(
        headless=headless,
        storage_state=storage_state
    )

    try:
        await login(page, adapter, timeout_ms=login_timeout_ms)

        report.posts, report.failures = await scrape_posts(
            page, posts, adapter, timeout_ms=timeout_ms, max_items=max_items
        )
        print(f"\n[OK] Scraped {len(posts)} post(s), {report.media_count} media item(s).")

        if download:
            cookies = await cookie_header(context)
            report.downloaded, download_failures = await download_posts(
                report.posts, out_dir, cookies=cookies, set_exif=set_exif
            )
            report.failures.extend(download_failures)

    finally:
        try:
            if wait_before_close:
                await wait_for_ack()
        finally:
            await close_page(pw, browser, context)

    print(f"\n[DONE] {report.downloaded} file(s) saved to {out_dir}.")
    if report.failures:
        print(f"[WARN] {len(report.failures)} post(s) failed:")
        for failure in report.failures:
            print(f"    {failure}")
    return report
