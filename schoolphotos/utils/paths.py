import re
from datetime import timezone
from pathlib import Path
from urllib.parse import unquote, urlparse

from schoolphotos.adapters.base import PostDescriptor

DISALLOWED_PATH_CHARS = re.compile(r'[<>:"/\\|?*]')


def sanitize(name: str) -> str:
    return DISALLOWED_PATH_CHARS.sub(" ", name).rstrip()


def group_dir_name(post: PostDescriptor) -> str:
    """Folder for one post: "<YYYY-MM-DD> <message id> <subject>"."""
    date = post.date
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    iso_date = date.date().isoformat()
    return sanitize(f"{iso_date} {post.message_id} {post.subject or ''}")


def group_dir(out_dir, post: PostDescriptor) -> Path:
    return Path(out_dir) / group_dir_name(post)


def filename_from_url(url: str) -> str:
    name = Path(unquote(urlparse(url).path)).name
    if not name:
        raise ValueError(f"URL has no file name: {url}")
    return name
