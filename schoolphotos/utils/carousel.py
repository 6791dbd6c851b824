from typing import List, Optional, Tuple

from schoolphotos.adapters.base import PostDescriptor, SiteAdapter
from schoolphotos.errors import CarouselOverrunError, StructuralError
from schoolphotos.utils.axtree import AXNode, ax_tree_from_cdp, find_ax_node

DEFAULT_TIMEOUT_MS = 10_000
MAX_ITEMS = 500


async def read_accessibility_tree(page) -> Optional[AXNode]:
    # Playwright dropped its own snapshot API; Chromium still serves the tree over CDP.
    session = await page.context.new_cdp_session(page)
    try:
        result = await session.send("Accessibility.getFullAXTree")
    finally:
        await session.detach()
    return ax_tree_from_cdp(result.get("nodes") or [])


async def resolve_media_source(media) -> str:
    """
    URL of the media element shown in the lightbox.

    Images (and some videos) expose it as the `src` property, which the
    browser already resolved to an absolute URL. Videos built with nested
    <source> children only have it there.
    """
    src = await (await media.get_property("src")).json_value()
    if src:
        return src

    source = await media.query_selector("source")
    if source is None:
        raise StructuralError("Cannot infer image or video source URL.")

    src = await (await source.get_property("src")).json_value()
    if not src:
        raise StructuralError("Nested <source> element has no URL.")
    return src


async def walk_carousel(
    page,
    post: PostDescriptor,
    adapter: SiteAdapter,
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    max_items: int = MAX_ITEMS,
) -> Tuple[str, ...]:
    """
    Open the post, open its lightbox on the first preview and page through it.

    Returns the media URLs in carousel order, or an empty tuple when the post
    has no media preview at all. Any other deviation from the expected page
    shape raises StructuralError; bounded waits raise Playwright's TimeoutError.
    """
    print(f"\n[POST] Scraping {post.label()}")

    # 1) Load post and wait for its body
    await page.goto(post.href, wait_until="domcontentloaded", timeout=timeout_ms)
    await page.wait_for_selector(adapter.post_marker, timeout=timeout_ms)

    # 2) Find the first preview through the accessibility tree
    snapshot = await read_accessibility_tree(page)
    if not snapshot:
        raise StructuralError("Cannot infer accessibility tree.")

    preview = find_ax_node(snapshot, adapter.is_media_preview)
    if preview is None:
        print("[WARN] No media found in the post.")
        return ()

    # 3) Open the lightbox and find its "next" control
    print(f"[INFO] Opening preview {preview.get('name')!r}")
    await adapter.open_preview(page, preview, timeout_ms=timeout_ms)

    lightbox = await page.wait_for_selector(adapter.lightbox_selector, timeout=timeout_ms)
    if lightbox is None:
        raise StructuralError("Lightbox did not open.")

    nav_right = await adapter.find_next_button(lightbox)
    if nav_right is None:
        raise StructuralError("No right navigation button found in lightbox.")

    # 4) Read, advance, stop once the control reports disabled
    sources: List[str] = []
    while True:
        if len(sources) >= max_items:
            raise CarouselOverrunError(
                f"Lightbox still navigable after {max_items} items; giving up."
            )

        media = await lightbox.wait_for_selector(adapter.media_selector, timeout=timeout_ms)
        if media is None:
            raise StructuralError("No media element found in lightbox.")

        src = await resolve_media_source(media)
        sources.append(src)
        print(f"[MEDIA] {len(sources):03}: {src}")

        # A disabled button is still clicked once at the end; force skips the enabled check.
        await nav_right.click(force=True, timeout=timeout_ms)
        if await nav_right.is_disabled():
            break

    print(f"[OK] {len(sources)} media item(s) found.")
    return tuple(sources)
