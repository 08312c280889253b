import re
from typing import Optional
from urllib.parse import urlparse, parse_qs

# Bare "v=" anywhere in the URL, including fragments like "#v=ID"
_BARE_V_PARAM = re.compile(r"[?&#]v=([^&#?/]+)")


def extract_youtube_id(url: str) -> Optional[str]:
    """
    Extract the YouTube video ID from short links, watch links, shorts/embed
    paths or a bare "v=" parameter.
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    segments = [segment for segment in parsed.path.split("/") if segment]

    if host == "youtu.be" and segments:
        return segments[0]

    video_id = parse_qs(parsed.query).get("v", [None])[0]
    if video_id:
        return video_id

    if len(segments) >= 2 and segments[0] in ("shorts", "embed", "live"):
        return segments[1]

    match = _BARE_V_PARAM.search(url)
    if match:
        return match.group(1)

    return None
