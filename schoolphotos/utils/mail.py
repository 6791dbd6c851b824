import email
from email import policy
from datetime import timezone
from email.utils import parseaddr, parsedate_to_datetime
from pathlib import Path
from typing import List, Optional

from bs4 import BeautifulSoup

from schoolphotos.adapters.base import PostDescriptor

SENDER = "noreply@socialschools.eu"
LINK_TEXT = "Bekijk de foto's in Social Schools"


def find_post_link(html: str, link_text: str = LINK_TEXT) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    for a in soup.find_all("a", href=True):
        if link_text in a.get_text(" ", strip=True):
            return a["href"]
    return None


def clean_subject(subject: Optional[str], prefix: str = "") -> Optional[str]:
    if subject is None:
        return None
    if prefix and subject.startswith(prefix):
        subject = subject[len(prefix):]
    subject = " ".join(subject.split())
    return subject or None


def html_body(message) -> Optional[str]:
    part = message.get_body(preferencelist=("html",))
    if part is None:
        return None
    return part.get_content()


def link_from_message(message, *, sender: str = SENDER, subject_prefix: str = "") -> Optional[PostDescriptor]:
    """Descriptor for one notification e-mail, or None when it is not one."""
    _, from_addr = parseaddr(message.get("From", ""))
    if sender and from_addr.lower() != sender.lower():
        return None

    html = html_body(message)
    if not html:
        print(f"[WARN] No HTML body in message {message.get('Message-ID')}")
        return None

    href = find_post_link(html)
    if not href:
        return None

    message_id = (message.get("Message-ID") or "").strip().strip("<>")
    date = parsedate_to_datetime(message["Date"])
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return PostDescriptor(
        message_id=message_id,
        date=date,
        subject=clean_subject(message.get("Subject"), subject_prefix),
        href=href,
    )


def links_from_eml_dir(directory, *, sender: str = SENDER, subject_prefix: str = "") -> List[PostDescriptor]:
    """
    Scan exported .eml files for photo notifications.

    Messages from other senders, without an HTML part or without the
    "view photos" link are skipped. Result is sorted oldest first.
    """
    links: List[PostDescriptor] = []
    for path in sorted(Path(directory).glob("*.eml")):
        try:
            with open(path, "rb") as f:
                message = email.message_from_binary_file(f, policy=policy.default)
            post = link_from_message(message, sender=sender, subject_prefix=subject_prefix)
        except (TypeError, ValueError, LookupError) as e:
            print(f"[WARN] Skipping unreadable message {path.name}: {e}")
            continue
        if post is None:
            continue
        if not post.message_id:
            post = PostDescriptor(path.stem, post.date, post.subject, post.href)
        links.append(post)

    links.sort(key=lambda p: p.date)
    return links
