import os
from pathlib import Path
from typing import List, Optional

import aiohttp

from schoolphotos.adapters.base import PostDescriptor
from schoolphotos.browser import UA
from schoolphotos.errors import ExifError
from schoolphotos.utils.exif import ensure_captured_date
from schoolphotos.utils.paths import filename_from_url, group_dir

CHUNK_SIZE = 64 * 1024
DOWNLOAD_TIMEOUT_S = 120


def open_http_session(cookie_header: Optional[str] = None) -> aiohttp.ClientSession:
    """
    HTTP session for out-of-band downloads.

    The cookie header comes from the live browser context, so requests carry
    the same authentication as the page that listed the media.
    """
    headers = {"User-Agent": UA}
    if cookie_header:
        headers["Cookie"] = cookie_header
    return aiohttp.ClientSession(
        headers=headers,
        timeout=aiohttp.ClientTimeout(total=DOWNLOAD_TIMEOUT_S),
    )


async def persist(session: aiohttp.ClientSession, url: str, dest_dir) -> Path:
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest_path = dest_dir / filename_from_url(url)

    if dest_path.exists():
        print(f"  [SKIP] File already exists: {dest_path.name}")
        return dest_path

    # Write to a side file so an interrupted transfer never looks complete.
    tmp_path = dest_path.with_name(dest_path.name + ".part")
    try:
        async with session.get(url) as resp:
            resp.raise_for_status()
            with tmp_path.open("wb") as f:
                async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                    f.write(chunk)
        os.replace(tmp_path, dest_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()

    print(f"  [OK] Downloaded: {dest_path.name}")
    return dest_path


async def download_post(
    session: aiohttp.ClientSession,
    post: PostDescriptor,
    out_dir,
    *,
    set_exif: bool = True,
) -> List[Path]:
    """Persist every media source of one post, then backfill its capture date."""
    target = group_dir(out_dir, post)
    print(f"\n[POST] Downloading {len(post.media_sources)} file(s) for {post.label()}")

    saved: List[Path] = []
    for url in post.media_sources:
        path = await persist(session, url, target)
        saved.append(path)
        if not set_exif:
            continue
        try:
            ensure_captured_date(path, post.date)
        except ExifError as e:
            print(f"  [ERR ] Failed to set EXIF date for {path}: {e}")
    return saved
