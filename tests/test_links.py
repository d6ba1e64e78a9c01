from utils.links import (
    content_counts,
    display_title,
    drive_download_url,
    drive_preview_url,
    extract_drive_id,
    extract_youtube_id,
    filter_blank_links,
    normalize_content_links,
    youtube_embed_url,
)


def test_normalize_legacy_string_links():
    assert normalize_content_links(["http://a"]) == [{"url": "http://a", "title": ""}]


def test_normalize_is_idempotent():
    links = [{"url": "http://a", "title": "Intro"}, {"url": "http://b", "title": ""}]
    once = normalize_content_links(links)
    assert once == links
    assert normalize_content_links(once) == once


def test_normalize_mixed_and_missing_titles():
    links = ["http://a", {"url": "http://b"}, {"url": "http://c", "title": None}]
    assert normalize_content_links(links) == [
        {"url": "http://a", "title": ""},
        {"url": "http://b", "title": ""},
        {"url": "http://c", "title": ""},
    ]
    assert normalize_content_links(None) == []


def test_filter_blank_links_drops_whitespace_urls():
    assert filter_blank_links([{"url": "  "}, {"url": "http://x"}, ""]) == [{"url": "http://x", "title": ""}]


def test_display_title_falls_back_to_position():
    assert display_title({"url": "http://a", "title": ""}, "video_links", 1) == "Video 2"
    assert display_title("http://a", "audio_links", 0) == "Audio 1"
    assert display_title({"url": "http://a", "title": "Lecture"}, "pdf_links", 4) == "Lecture"


def test_youtube_short_link():
    assert extract_youtube_id("https://youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"


def test_youtube_accepted_forms():
    for url in (
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/v/dQw4w9WgXcQ?version=3",
        "https://youtu.be/dQw4w9WgXcQ?t=42",
    ):
        assert extract_youtube_id(url) == "dQw4w9WgXcQ", url


def test_youtube_rejects_wrong_length_tokens():
    assert extract_youtube_id("https://youtu.be/dQw4w9WgXc") is None
    assert extract_youtube_id("https://example.com/video.mp4") is None
    assert extract_youtube_id("") is None
    assert youtube_embed_url("https://youtu.be/short") is None


def test_youtube_embed_url():
    assert youtube_embed_url("https://youtu.be/dQw4w9WgXcQ") == "https://www.youtube.com/embed/dQw4w9WgXcQ"


def test_drive_path_and_query_forms():
    assert extract_drive_id("https://drive.google.com/file/d/ABC123/view") == "ABC123"
    assert extract_drive_id("https://drive.google.com/open?id=XYZ987") == "XYZ987"
    assert extract_drive_id("https://example.com/file.pdf") is None


def test_drive_path_wins_over_query():
    assert extract_drive_id("https://drive.google.com/file/d/PATH_1/view?id=QUERY_2") == "PATH_1"


def test_drive_urls():
    url = "https://drive.google.com/file/d/ABC123/view"
    assert drive_preview_url(url) == "https://drive.google.com/file/d/ABC123/preview"
    assert drive_download_url(url) == "https://drive.google.com/uc?export=download&id=ABC123"


def test_content_counts_ignores_blank_links():
    week = {
        "videoLinks": ["http://v1", {"url": " "}],
        "audioLinks": [],
        "pdfLinks": [{"url": "http://p", "title": "Notes"}],
        "questions": [{"question": "Q?"}],
    }
    assert content_counts(week) == {"videos": 1, "audio": 0, "pdfs": 1, "questions": 1}
