# tests/test_resolver.py
"""Test media reference resolution"""

import pytest

from votequeue.media.resolver import MAX_INPUT_LENGTH, embed_url, is_resolvable, resolve, watch_url


class TestResolve:
    """Test identifier extraction"""

    @pytest.mark.parametrize("text", [
        "https://youtu.be/dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/v/dQw4w9WgXcQ",
        "https://www.youtube.com/e/dQw4w9WgXcQ",
        "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "youtube.com/watch?v=dQw4w9WgXcQ",
        "check this out https://youtu.be/dQw4w9WgXcQ?si=abc",
        "https://m.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ#t=30",
        "check this out https://youtu.be/dQw4w9WgXcQ.",
        "(https://youtu.be/dQw4w9WgXcQ)",
        "https://www.youtube.com/user/RickAstleyVEVO/dQw4w9WgXcQ",
    ])
    def test_supported_shapes(self, text):
        """Test every supported link shape"""
        assert resolve(text) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize("text", [
        "not a url",
        "",
        "https://vimeo.com/123456789",
        "https://youtu.be/short",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQXYZ",
        "https://www.youtube.com/",
        "dQw4w9WgXcQ",
    ])
    def test_rejected_inputs(self, text):
        """Test inputs that carry no valid identifier"""
        assert resolve(text) is None

    def test_non_string_input(self):
        assert resolve(None) is None
        assert resolve(42) is None

    def test_oversized_input(self):
        """Test that absurdly long input is refused"""
        text = "https://youtu.be/dQw4w9WgXcQ" + "x" * MAX_INPUT_LENGTH
        assert resolve(text) is None

    def test_is_resolvable(self):
        assert is_resolvable("https://youtu.be/dQw4w9WgXcQ")
        assert not is_resolvable("not a url")


class TestUrlBuilders:
    """Test URL construction"""

    def test_watch_url(self):
        assert watch_url("dQw4w9WgXcQ") == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    def test_embed_url(self):
        assert embed_url("dQw4w9WgXcQ") == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        assert embed_url("dQw4w9WgXcQ", autoplay=True) == "https://www.youtube.com/embed/dQw4w9WgXcQ?autoplay=1"

    def test_embed_url_round_trips_through_resolve(self):
        assert resolve(embed_url("dQw4w9WgXcQ", autoplay=True)) == "dQw4w9WgXcQ"
