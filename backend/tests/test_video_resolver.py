import pytest

from backend.portfolio.utils.video import VideoPlatform, VideoReference, coerce_reference, resolve_video_url


def _yt(video_id):
    return VideoReference(platform=VideoPlatform.youtube, id=video_id)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("youtube.com/watch?v=i_HtDNSxCnE", "i_HtDNSxCnE"),
        ("https://youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ?t=42", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/embed/dQw4w9WgXcQ?start=10", "dQw4w9WgXcQ"),
        ("https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ&t=5s", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/v/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/shorts/aBc-123_xYz", "aBc-123_xYz"),
        ("https://m.youtube.com/watch?v=dQw4w9WgXcQ#comments", "dQw4w9WgXcQ"),
        ("  https://www.youtube.com/watch?v=dQw4w9WgXcQ  ", "dQw4w9WgXcQ"),
    ],
)
def test_youtube_shapes(url, expected):
    assert resolve_video_url(url) == _yt(expected)


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com",
        "youtube.com/watch",
        "https://www.youtube.com/watch?v=short",
        # 12 id characters: not bounded after 11
        "https://www.youtube.com/watch?v=dQw4w9WgXcQX",
        "https://youtu.be/",
    ],
)
def test_youtube_without_valid_id_is_not_recognized(url):
    assert resolve_video_url(url) is None


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://vimeo.com/76979871", "76979871"),
        ("vimeo.com/76979871", "76979871"),
        ("https://vimeo.com/76979871?share=copy", "76979871"),
        ("https://vimeo.com/76979871/abc123def", "76979871"),
        ("https://vimeo.com/channels/staffpicks/76979871", "76979871"),
        ("https://vimeo.com/groups/shortfilms/videos/76979871", "76979871"),
        ("https://vimeo.com/album/2222222/video/76979871", "76979871"),
        ("https://player.vimeo.com/video/76979871?h=abc", "76979871"),
    ],
)
def test_vimeo_shapes(url, expected):
    assert resolve_video_url(url) == VideoReference(platform=VideoPlatform.vimeo, id=expected)


def test_vimeo_requires_digits_at_a_boundary():
    assert resolve_video_url("https://vimeo.com/channels/staffpicks") is None
    assert resolve_video_url("https://vimeo.com/76979871abc") is None


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://www.linkedin.com/feed/update/urn:li:activity:7123456789012345678/", "7123456789012345678"),
        ("linkedin.com/feed/update/7123456789", "7123456789"),
        ("https://www.linkedin.com/posts/urn:li:activity:7000000000000000001", "7000000000000000001"),
        ("https://www.linkedin.com/posts/jane-doe_video-activity-7111111111111111111-AbCd", "7111111111111111111"),
    ],
)
def test_linkedin_shapes(url, expected):
    assert resolve_video_url(url) == VideoReference(platform=VideoPlatform.linkedin, id=expected)


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "\n\t", "not-a-url", "https://example.com/video.mp4", "https://linkedin.com/in/someone", 42, b"bytes"],
)
def test_unrecognized_input_returns_none_without_raising(raw):
    assert resolve_video_url(raw) is None


def test_first_platform_branch_wins():
    # mentions both domains; YouTube branch is tried alone and has no id
    assert resolve_video_url("youtube.com see vimeo.com/76979871") is None
    assert resolve_video_url("https://vimeo.com/76979871?ref=youtube") == VideoReference(platform=VideoPlatform.vimeo, id="76979871")


def test_resolution_is_idempotent_and_case_preserving():
    url = "https://www.YouTube.com/watch?v=AbCdEfGhIjK"
    first = resolve_video_url(url)
    assert first == resolve_video_url(url)
    assert first.id == "AbCdEfGhIjK"
    assert first.to_dict() == {"platform": "youtube", "id": "AbCdEfGhIjK"}


def test_coerce_reference():
    assert coerce_reference("YouTube", " dQw4w9WgXcQ ") == _yt("dQw4w9WgXcQ")
    assert coerce_reference("vimeo", "") is None
    assert coerce_reference("dailymotion", "x7") is None
    assert coerce_reference(None, "abc") is None


def test_privacy_enhanced_youtube_host_is_recognized():
    ref = resolve_video_url("https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ?start=10")
    assert ref == VideoReference(platform=VideoPlatform.youtube, id="dQw4w9WgXcQ")
    assert resolve_video_url("youtube-nocookie.com/embed/short") is None
