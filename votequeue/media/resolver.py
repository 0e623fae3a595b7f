"""
Media reference resolution for votequeue.

Turns whatever the user pasted into the canonical 11-character YouTube
video identifier, or None when the text holds no recognizable link.

Recognized shapes:
    https://youtu.be/dQw4w9WgXcQ                      (short link)
    https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10  (watch query)
    https://www.youtube.com/embed/dQw4w9WgXcQ         (embed path)
    https://www.youtube.com/e/dQw4w9WgXcQ             (short embed path)
    https://www.youtube.com/v/dQw4w9WgXcQ             (legacy player path)
    https://www.youtube.com/user/someone/dQw4w9WgXcQ  (legacy channel path)

resolve() runs on every keystroke of the submit box, so it is pure,
uses a single precompiled pattern and never touches the network.

Usage:
    from votequeue.media.resolver import resolve, embed_url

    video_id = resolve(text)
    if video_id:
        print(embed_url(video_id))
"""

import re


VIDEO_ID_LENGTH = 11

# Inputs longer than this are not links anyone typed or pasted
MAX_INPUT_LENGTH = 2048

WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"
EMBED_URL_TEMPLATE = "https://www.youtube.com/embed/{video_id}"

# Alphabet of video identifiers
_ID_CHAR = r"[A-Za-z0-9_-]"

_VIDEO_ID_PATTERN = re.compile(
    r"(?:youtube\.com/"
    r"(?:[^/]+/.+/"            # legacy /user/<name>/<id> and similar
    r"|(?:v|e(?:mbed)?)/"      # /v/<id>, /e/<id>, /embed/<id>
    r"|.*[?&]v=)"              # watch?v=<id>, ...&v=<id>
    r"|youtu\.be/)"
    rf"({_ID_CHAR}{{{VIDEO_ID_LENGTH}}})"
    rf"(?!{_ID_CHAR})"         # exactly 11: a longer token is not a partial match
)


def resolve(text: str | None) -> str | None:
    """
    Extract the canonical video identifier from free-form text.

    Args:
        text: Anything the user typed or pasted.

    Returns:
        The 11-character identifier, or None if no supported link shape
        is found, the token is shorter or longer than 11 characters, or
        the input is empty or not a string.

    Examples:
        resolve("https://youtu.be/dQw4w9WgXcQ")                      # "dQw4w9WgXcQ"
        resolve("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10")  # "dQw4w9WgXcQ"
        resolve("https://www.youtube.com/embed/dQw4w9WgXcQ")         # "dQw4w9WgXcQ"
        resolve("not a url")                                         # None
    """
    if not isinstance(text, str) or not text or len(text) > MAX_INPUT_LENGTH:
        return None

    match = _VIDEO_ID_PATTERN.search(text)
    return match.group(1) if match else None


def is_resolvable(text: str | None) -> bool:
    """Return True if resolve() would find an identifier in text."""
    return resolve(text) is not None


def watch_url(video_id: str) -> str:
    """
    Build the canonical watch URL for an identifier.

    This is the URL handed to the metadata lookup service.
    """
    return WATCH_URL_TEMPLATE.format(video_id=video_id)


def embed_url(video_id: str, autoplay: bool = False) -> str:
    """
    Build the embeddable player URL for an identifier.

    Args:
        video_id: Canonical identifier.
        autoplay: Append autoplay=1, as the now-playing frame does.
    """
    url = EMBED_URL_TEMPLATE.format(video_id=video_id)
    if autoplay:
        url += "?autoplay=1"
    return url
