from dataclasses import dataclass, replace      # frozen records, copied instead of mutated
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, List


@dataclass(frozen=True)
class PostDescriptor:                                  # One notification e-mail pointing at one post
    message_id: str                                    # Opaque id of the originating e-mail
    date: datetime                                     # Received date, used for folders and EXIF fallback
    subject: Optional[str]                             # Human label (sanitized before it touches a path)
    href: str                                          # Absolute URL of the post page
    media_sources: Tuple[str, ...] = ()                # Carousel order; empty until the walker ran

    def with_media(self, sources) -> "PostDescriptor":
        return replace(self, media_sources=tuple(sources))

    def label(self) -> str:
        return f"{self.message_id} {self.subject or ''} {self.href}".replace("  ", " ")


class SiteAdapter:                                     # Locator strategy: how to find things on one site's UI
    name: str = "base"                                 # Human-readable adapter name (override per site)
    domains: List[str] = []                            # Domain fragments handled by this adapter
    login_url: str = ""                                # Landing page used to establish the session

    post_marker: str = ""                              # Element that proves the post body rendered
    lightbox_selector: str = ""                        # Full-screen viewer container
    media_selector: str = "img,video"                  # Media element inside the viewer

    def is_media_preview(self, node: Dict[str, Any]) -> bool:
        """Predicate over one accessibility node: is this the first clickable media preview?"""
        raise NotImplementedError

    async def open_preview(self, page, node: Dict[str, Any], timeout_ms: int): ...   # Activate the found preview

    async def find_next_button(self, lightbox): ...    # "Navigate right" control inside the viewer, or None

    async def wait_logged_in(self, page, timeout_ms: int):
        """Block until the logged-in landing page shows; raises on timeout."""
        raise NotImplementedError
