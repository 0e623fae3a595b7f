# tests/test_enrichment.py
"""Test the metadata lookup client"""

from unittest.mock import Mock

import pytest
import requests

from votequeue.core.exceptions import EnrichmentError, UnknownMediaError
from votequeue.media.enrichment import EnrichmentClient, MediaInfo
from votequeue.sync.models import PLACEHOLDER_THUMBNAIL_LARGE, PLACEHOLDER_THUMBNAIL_SMALL


def make_client(payload=None, error=None, invalid_json=False):
    session = Mock()
    response = Mock()
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    client = EnrichmentClient(endpoint="https://noembed.test/embed", timeout=3, session=session)
    return client, session, response


class TestLookup:
    """Test metadata lookups"""

    def test_lookup(self):
        client, session, _ = make_client({
            "title": "Rick Astley - Never Gonna Give You Up ",
            "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
            "author_name": "Rick Astley",
        })

        info = client.lookup("dQw4w9WgXcQ")

        session.get.assert_called_once_with(
            "https://noembed.test/embed",
            params={"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"},
            timeout=3,
        )
        assert info.title == "Rick Astley - Never Gonna Give You Up"
        assert info.thumbnail_small == info.thumbnail_large
        assert info.author == "Rick Astley"

    def test_missing_thumbnail_uses_placeholders(self):
        client, _, _ = make_client({"title": "Song"})
        info = client.lookup("dQw4w9WgXcQ")
        assert info.thumbnail_small == PLACEHOLDER_THUMBNAIL_SMALL
        assert info.thumbnail_large == PLACEHOLDER_THUMBNAIL_LARGE

    @pytest.mark.parametrize("payload", [
        {"error": "404 Not Found"},
        {"title": ""},
        {"title": "   "},
        {"title": None},
    ])
    def test_no_title_is_unknown_media(self, payload):
        """Test that a titleless answer means the video does not exist"""
        client, _, _ = make_client(payload)
        with pytest.raises(UnknownMediaError) as exc_info:
            client.lookup("aaaaaaaaaaa")
        assert exc_info.value.details["item_id"] == "aaaaaaaaaaa"

    def test_transport_error(self):
        client, _, _ = make_client(error=requests.exceptions.ConnectionError("down"))
        with pytest.raises(EnrichmentError) as exc_info:
            client.lookup("dQw4w9WgXcQ")
        assert not isinstance(exc_info.value, UnknownMediaError)

    def test_http_error_status(self):
        client, _, response = make_client({"title": "Song"})
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
        with pytest.raises(EnrichmentError):
            client.lookup("dQw4w9WgXcQ")

    def test_invalid_json(self):
        client, _, _ = make_client(invalid_json=True)
        with pytest.raises(EnrichmentError):
            client.lookup("dQw4w9WgXcQ")

    def test_non_object_payload(self):
        client, _, _ = make_client(["title"])
        with pytest.raises(EnrichmentError):
            client.lookup("dQw4w9WgXcQ")


class TestMediaInfo:
    """Test conversion to queue items"""

    def test_to_item(self):
        info = MediaInfo(video_id="dQw4w9WgXcQ", title="Song", thumbnail_small="s", thumbnail_large="l")
        item = info.to_item()
        assert item.id == "dQw4w9WgXcQ"
        assert item.title == "Song"
        assert item.thumbnail_small == "s"
        assert item.score == 0
        assert item.voted_by_local_user is False
