import pytest

from video_manager.platforms import (
    VideoPlatform,
    detect_platform,
    extract_video_id,
    get_thumbnail,
    is_valid_video_url,
    platform_display_name,
    platform_placeholder,
    youtube_thumbnail,
)


@pytest.mark.parametrize("url,platform", [
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", VideoPlatform.youtube),
    ("https://youtu.be/dQw4w9WgXcQ", VideoPlatform.youtube),
    ("https://www.youtube.com/embed/dQw4w9WgXcQ", VideoPlatform.youtube),
    ("https://youtube.com/shorts/abc_123", VideoPlatform.youtube),
    ("https://www.facebook.com/someone/videos/1234567890", VideoPlatform.facebook),
    ("https://www.facebook.com/watch/?v=1234567890", VideoPlatform.facebook),
    ("https://fb.watch/xYz12/", VideoPlatform.facebook),
    ("https://www.facebook.com/reel/987654321", VideoPlatform.facebook),
    ("https://www.instagram.com/reel/Cabc123/", VideoPlatform.instagram),
    ("https://www.instagram.com/p/Cabc123/", VideoPlatform.instagram),
    ("https://www.instagram.com/reels/Cabc123/", VideoPlatform.instagram),
    ("https://instagr.am/p/Cabc123", VideoPlatform.instagram),
    ("https://www.tiktok.com/@creator/video/7234567890123456789", VideoPlatform.tiktok),
    ("https://www.tiktok.com/t/ZTabc123/", VideoPlatform.tiktok),
    ("https://vm.tiktok.com/ZMabc123/", VideoPlatform.tiktok),
])
def test_detect_known_platforms(url, platform):
    assert detect_platform(url) == platform
    assert is_valid_video_url(url)


@pytest.mark.parametrize("url", [
    "https://vimeo.com/123456",
    "https://example.com/watch?v=abc",
    "not a url",
    "",
    None,
])
def test_detect_unknown(url):
    """Anything unrecognised, including garbage, is unknown"""
    assert detect_platform(url) == VideoPlatform.unknown
    assert extract_video_id(url) is None
    assert not is_valid_video_url(url)


def test_youtube_wins_over_later_platforms():
    url = "https://www.youtube.com/watch?v=abc123&ref=facebook.com/reel/1"
    assert detect_platform(url) == VideoPlatform.youtube


def test_extract_video_id():
    assert extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42") == "dQw4w9WgXcQ"
    assert extract_video_id("https://youtu.be/dQw4w9WgXcQ?si=share") == "dQw4w9WgXcQ"
    assert extract_video_id("https://www.tiktok.com/@creator/video/7234567890123456789") == "7234567890123456789"
    assert extract_video_id("https://www.instagram.com/reel/Cabc123/?igsh=x") == "Cabc123"


def test_youtube_thumbnail():
    assert youtube_thumbnail("abc") == "https://img.youtube.com/vi/abc/mqdefault.jpg"
    assert get_thumbnail("https://youtu.be/abc") == "https://img.youtube.com/vi/abc/mqdefault.jpg"


def test_placeholders():
    assert get_thumbnail("https://www.tiktok.com/t/ZTabc/").startswith("data:image/svg+xml,")
    assert platform_placeholder(VideoPlatform.unknown) == "/placeholder.svg"
    assert get_thumbnail("https://example.com") == "/placeholder.svg"


def test_display_names():
    assert platform_display_name(VideoPlatform.tiktok) == "TikTok"
    assert platform_display_name("youtube") == "YouTube"
