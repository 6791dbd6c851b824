import argparse
import asyncio
import sys

from schoolphotos.dispatcher import LOGIN_TIMEOUT_MS, crawl_posts
from schoolphotos.errors import ScrapeError
from schoolphotos.utils.carousel import DEFAULT_TIMEOUT_MS, MAX_ITEMS
from schoolphotos.utils.corpus import load_links

DEFAULT_LINKS = "links.json"
DEFAULT_OUT_DIR = "downloaded_photos"


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Download the photos of Social Schools posts listed in links.json")
    p.add_argument("--links", default=DEFAULT_LINKS, help="Post list written by extract_links.py")
    p.add_argument("--out-dir", default=DEFAULT_OUT_DIR, help="One sub folder per post is created here")
    p.add_argument("--headless", action="store_true",
                   help="Run headless (only useful together with --storage-state)")
    p.add_argument("--storage-state", type=str, default=None,
                   help="Playwright storage_state json from save_session.py")
    p.add_argument("--post-marker", type=str, default=None,
                   help="CSS selector that marks a loaded post (default: main .ss-chat)")
    p.add_argument("--timeout-ms", type=int, default=DEFAULT_TIMEOUT_MS, help="Bound for every page wait")
    p.add_argument("--login-timeout-ms", type=int, default=LOGIN_TIMEOUT_MS,
                   help="How long to wait for the manual login")
    p.add_argument("--max-items", type=int, default=MAX_ITEMS, help="Safety limit per post carousel")
    p.add_argument("--skip-download", action="store_true", help="Only list media, download nothing")
    p.add_argument("--no-exif", action="store_true", help="Do not backfill EXIF capture dates")
    p.add_argument("--no-wait", action="store_true", help="Close the browser without asking")
    return p.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        posts = load_links(args.links)
        print(f"[OK] Loaded {len(posts)} post(s) from {args.links}")

        await crawl_posts(
            posts,
            args.out_dir,
            headless=args.headless,
            storage_state=args.storage_state,
            post_marker=args.post_marker,
            timeout_ms=args.timeout_ms,
            login_timeout_ms=args.login_timeout_ms,
            max_items=args.max_items,
            download=not args.skip_download,
            set_exif=not args.no_exif,
            wait_before_close=not args.no_wait,
        )
    except ScrapeError as e:
        print(f"[FATAL] {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"[FATAL] {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


def cli() -> int:
    return asyncio.run(main())


if __name__ == "__main__":
    sys.exit(cli())
