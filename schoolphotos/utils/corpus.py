import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

from schoolphotos.adapters.base import PostDescriptor
from schoolphotos.errors import CorpusError


def parse_date(value: str) -> datetime:
    # JSON dates come from JavaScript-style ISO strings ("...Z").
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def load_links(path) -> List[PostDescriptor]:
    """
    Load the persisted post list written by extract_links.py.

    Each entry needs messageId, date (ISO 8601) and href; subject is optional.
    Media sources always start out empty.
    """
    p = Path(path)
    if not p.exists():
        raise CorpusError(
            f"Links file not found at {p}. Run extract_links.py first."
        )

    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CorpusError(f"Failed to read links file {p}: {e}") from e

    if not isinstance(raw, list):
        raise CorpusError(f"Links file {p} must contain a JSON array")

    posts: List[PostDescriptor] = []
    for i, entry in enumerate(raw):
        try:
            posts.append(
                PostDescriptor(
                    message_id=str(entry["messageId"]),
                    date=parse_date(entry["date"]),
                    subject=entry.get("subject"),
                    href=entry["href"],
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CorpusError(f"Invalid entry #{i} in {p}: {e}") from e
    return posts


def save_links(path, posts: Iterable[PostDescriptor]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = [
        {
            "messageId": post.message_id,
            "date": format_date(post.date),
            "subject": post.subject,
            "href": post.href,
        }
        for post in posts
    ]
    with open(p, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    return p
