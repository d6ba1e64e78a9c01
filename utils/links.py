from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

_YOUTUBE_RE = re.compile(r"(?:youtu\.be/|/v/|/u/\w/|/embed/|[?&]v=)([^#&?/]*)")
_DRIVE_PATH_RE = re.compile(r"/d/([a-zA-Z0-9_-]+)")
_DRIVE_QUERY_RE = re.compile(r"[?&]id=([a-zA-Z0-9_-]+)")
YOUTUBE_ID_LENGTH = 11

LINK_KINDS = {
    "video_links": "Video",
    "audio_links": "Audio",
    "pdf_links": "PDF",
}


def _as_item(item: Any) -> Dict[str, str]:
    if isinstance(item, str):
        return {"url": item, "title": ""}
    if isinstance(item, dict):
        return {"url": item.get("url") or "", "title": item.get("title") or ""}
    # already-parsed ContentItem
    return {"url": getattr(item, "url", "") or "", "title": getattr(item, "title", "") or ""}


def normalize_content_links(links: Optional[Iterable[Any]]) -> List[Dict[str, str]]:
    """Turn bare URL strings and {url, title?} records into {url, title} records.

    Missing titles become "" here; positional labels such as "Video 2" are a
    presentation concern, see display_title(). Normalizing twice is a no-op.
    """
    if not links:
        return []
    return [_as_item(item) for item in links]


def filter_blank_links(links: Iterable[Any]) -> List[Dict[str, str]]:
    """Drop entries whose url is empty or whitespace (unfinished form rows)."""
    return [item for item in normalize_content_links(links) if item["url"].strip()]


def display_title(item: Any, kind: str, index: int) -> str:
    title = _as_item(item)["title"].strip()
    if title:
        return title
    label = LINK_KINDS.get(kind, kind)
    return f"{label} {index + 1}"


def extract_youtube_id(url: Optional[str]) -> Optional[str]:
    """Video id from youtu.be/, /v/, /embed/ or ?v= URLs; None unless exactly 11 chars."""
    if not url:
        return None
    match = _YOUTUBE_RE.search(url)
    if not match:
        return None
    video_id = match.group(1)
    return video_id if len(video_id) == YOUTUBE_ID_LENGTH else None


def extract_drive_id(url: Optional[str]) -> Optional[str]:
    """Google Drive file id from a /d/<id> path, else an id=<id> query parameter."""
    if not url:
        return None
    match = _DRIVE_PATH_RE.search(url) or _DRIVE_QUERY_RE.search(url)
    return match.group(1) if match else None


def youtube_embed_url(url: str) -> Optional[str]:
    video_id = extract_youtube_id(url)
    return f"https://www.youtube.com/embed/{video_id}" if video_id else None


def drive_preview_url(url: str) -> Optional[str]:
    file_id = extract_drive_id(url)
    return f"https://drive.google.com/file/d/{file_id}/preview" if file_id else None


def drive_download_url(url: str) -> Optional[str]:
    file_id = extract_drive_id(url)
    return f"https://drive.google.com/uc?export=download&id={file_id}" if file_id else None


def content_counts(week: Dict[str, Any]) -> Dict[str, int]:
    """Non-blank link counts per kind for a stored week record."""
    return {
        "videos": len(filter_blank_links(week.get("videoLinks"))),
        "audio": len(filter_blank_links(week.get("audioLinks"))),
        "pdfs": len(filter_blank_links(week.get("pdfLinks"))),
        "questions": len(week.get("questions") or []),
    }
