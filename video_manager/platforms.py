"""Video platform detection from URLs.

Each platform owns an ordered list of patterns. Platforms are tried in a fixed
order (YouTube, Facebook, Instagram, TikTok) and the first pattern that
matches decides both the platform and the video id. Nothing here touches the
network; URLs that match no pattern are simply ``unknown``.
"""

from typing import Dict, List, Optional, Pattern
from urllib.parse import quote
import enum
import re


class VideoPlatform(str, enum.Enum):
    youtube = "youtube"
    facebook = "facebook"
    instagram = "instagram"
    tiktok = "tiktok"
    unknown = "unknown"


PLATFORM_PATTERNS: Dict[VideoPlatform, List[Pattern]] = {
    VideoPlatform.youtube: [
        re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
        re.compile(r"youtube\.com/shorts/([^&\n?#]+)"),
    ],
    VideoPlatform.facebook: [
        re.compile(r"facebook\.com/.*/videos/(\d+)"),
        re.compile(r"facebook\.com/watch/?\?v=(\d+)"),
        re.compile(r"fb\.watch/([^/?]+)"),
        re.compile(r"facebook\.com/reel/(\d+)"),
    ],
    VideoPlatform.instagram: [
        re.compile(r"instagram\.com/reel/([^/?]+)"),
        re.compile(r"instagram\.com/p/([^/?]+)"),
        re.compile(r"instagram\.com/reels/([^/?]+)"),
        re.compile(r"instagr\.am/reel/([^/?]+)"),
        re.compile(r"instagr\.am/p/([^/?]+)"),
    ],
    VideoPlatform.tiktok: [
        re.compile(r"tiktok\.com/@[^/]+/video/(\d+)"),
        re.compile(r"tiktok\.com/t/([^/?]+)"),
        re.compile(r"vm\.tiktok\.com/([^/?]+)"),
        re.compile(r"tiktok\.com/v/(\d+)"),
    ],
}

DISPLAY_NAMES = {
    VideoPlatform.youtube: "YouTube",
    VideoPlatform.facebook: "Facebook",
    VideoPlatform.instagram: "Instagram",
    VideoPlatform.tiktok: "TikTok",
    VideoPlatform.unknown: "Unknown",
}

_PLACEHOLDER_SVGS = {
    VideoPlatform.facebook: (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 400 225" fill="none">'
        '<rect width="400" height="225" fill="#1877F2"/>'
        '<path d="M200 45c-37.5 0-67.5 30-67.5 67.5 0 33.75 24.75 61.5 57 66.75v-47.25h-17.25'
        'v-19.5h17.25v-15c0-17.25 10.5-26.25 25.5-26.25 7.5 0 15 1.5 15 1.5v16.5h-8.25'
        'c-8.25 0-10.5 5.25-10.5 10.5v12.75h18.75l-3 19.5h-15.75v47.25c32.25-5.25 57-33 '
        '57-66.75 0-37.5-30-67.5-67.5-67.5z" fill="white"/></svg>'
    ),
    VideoPlatform.instagram: (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 400 225" fill="none">'
        '<defs><linearGradient id="ig" x1="0%" y1="100%" x2="100%" y2="0%">'
        '<stop offset="0%" style="stop-color:#FCAF45"/>'
        '<stop offset="50%" style="stop-color:#E1306C"/>'
        '<stop offset="100%" style="stop-color:#833AB4"/>'
        '</linearGradient></defs>'
        '<rect width="400" height="225" fill="url(#ig)"/>'
        '<rect x="150" y="62.5" width="100" height="100" rx="25" stroke="white" stroke-width="8" fill="none"/>'
        '<circle cx="200" cy="112.5" r="25" stroke="white" stroke-width="8" fill="none"/>'
        '<circle cx="235" cy="77.5" r="8" fill="white"/></svg>'
    ),
    VideoPlatform.tiktok: (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 400 225" fill="none">'
        '<rect width="400" height="225" fill="#010101"/>'
        '<path d="M237.5 52.5c0 22 18 40 40 40v25c-14 0-27-4.5-38-12.5v57c0 33.5-27 60.5-60 '
        '60.5s-60-27-60-60.5c0-33.5 27-60.5 60-60.5v25c-19.5 0-35 16-35 35.5s15.5 35.5 35 '
        '35.5 35-16 35-35.5V52.5h23z" fill="white"/></svg>'
    ),
    VideoPlatform.youtube: (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 400 225" fill="none">'
        '<rect width="400" height="225" fill="#FF0000"/>'
        '<path d="M160 82.5v60l52-30-52-30z" fill="white"/></svg>'
    ),
}

DEFAULT_PLACEHOLDER = "/placeholder.svg"


def detect_platform(url: str) -> VideoPlatform:
    """Return the first platform with a pattern matching the URL."""
    for platform, patterns in PLATFORM_PATTERNS.items():
        for pattern in patterns:
            if pattern.search(url or ""):
                return platform
    return VideoPlatform.unknown


def extract_video_id(url: str) -> Optional[str]:
    """Return the id captured by the first matching pattern, if any."""
    for patterns in PLATFORM_PATTERNS.values():
        for pattern in patterns:
            match = pattern.search(url or "")
            if match:
                return match.group(1)
    return None


def youtube_thumbnail(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/mqdefault.jpg"


def platform_placeholder(platform: VideoPlatform) -> str:
    svg = _PLACEHOLDER_SVGS.get(VideoPlatform(platform))
    if svg is None:
        return DEFAULT_PLACEHOLDER
    return "data:image/svg+xml," + quote(svg)


def get_thumbnail(url: str) -> str:
    """Thumbnail for any supported URL.

    Only YouTube exposes thumbnails without an access token; every other
    platform gets its placeholder image.
    """
    platform = detect_platform(url)
    if platform == VideoPlatform.youtube:
        video_id = extract_video_id(url)
        if video_id:
            return youtube_thumbnail(video_id)
    return platform_placeholder(platform)


def is_valid_video_url(url: str) -> bool:
    return detect_platform(url) != VideoPlatform.unknown


def platform_display_name(platform: VideoPlatform) -> str:
    return DISPLAY_NAMES[VideoPlatform(platform)]
