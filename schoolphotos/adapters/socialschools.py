import re
from typing import Any, Dict, Optional

from schoolphotos.adapters.base import SiteAdapter
from schoolphotos.utils.axtree import is_media_preview


class SocialSchoolsAdapter(SiteAdapter):
    name = "socialschools"
    domains = ["socialschools.eu", "socialschools.nl"]
    login_url = "https://app.socialschools.eu"

    POST_MARKER = "main .ss-chat"                          # Chat-style post body
    LIGHTBOX = '*[class*="LightBox"]'                      # Styled-components class, hashed suffix
    LOGIN_MARKER = "Agenda voor de komende"                # Dashboard text once logged in
    NAV_RIGHT_RE = re.compile(r"navigateright", re.IGNORECASE)   # Icon name inside the button markup

    def __init__(self, post_marker: Optional[str] = None):
        # Post pages and archived posts render different wrappers; the rest is shared.
        self.post_marker = post_marker or self.POST_MARKER
        self.lightbox_selector = self.LIGHTBOX

    def is_media_preview(self, node: Dict[str, Any]) -> bool:
        return is_media_preview(node)

    async def open_preview(self, page, node: Dict[str, Any], timeout_ms: int):
        # Snapshot nodes carry no handle, so resolve the node again by role + name.
        target = page.get_by_role(node["role"], name=node["name"], exact=True).first
        await target.click(timeout=timeout_ms)

    async def find_next_button(self, lightbox):
        # Class names are generated per build; the icon markup is the stable part.
        for button in await lightbox.query_selector_all("button"):
            html = await button.inner_html()
            if self.NAV_RIGHT_RE.search(html or ""):
                return button
        return None

    async def wait_logged_in(self, page, timeout_ms: int):
        await page.get_by_text(self.LOGIN_MARKER).first.wait_for(timeout=timeout_ms)
