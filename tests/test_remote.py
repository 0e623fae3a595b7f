# tests/test_remote.py
"""Test queue service clients with a mocked HTTP session"""

from unittest.mock import Mock

import pytest
import requests

from votequeue.core.config import parse_config
from votequeue.core.exceptions import FetchError, VoteError
from votequeue.remote.fetcher import QueueFetchClient
from votequeue.remote.ledger import VoteLedgerClient
from votequeue.remote.session import USER_AGENT, ApiSession
from votequeue.sync.models import VoteDirection


def make_response(payload=None, status_code=200, invalid_json=False):
    """Mock requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = "" if payload is None else str(payload)
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def http():
    """Mock requests.Session"""
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def api(http):
    return ApiSession("http://queue.test/", timeout=5, headers={"Cookie": "s=1"}, session=http)


class TestApiSession:
    """Test the shared session wrapper"""

    def test_headers_and_base_url(self, api, http):
        assert api.base_url == "http://queue.test"
        assert http.headers["User-Agent"] == USER_AGENT
        assert http.headers["Cookie"] == "s=1"
        assert api.url_for("/api/streams/my") == "http://queue.test/api/streams/my"

    def test_from_config(self):
        config = parse_config({"server": {"base_url": "http://queue.test", "timeout": 2}})
        api = ApiSession.from_config(config.server)
        assert api.base_url == "http://queue.test"
        assert api.timeout == 2.0
        api.close()

    def test_timeout_applied(self, api, http):
        http.request.return_value = make_response({"streams": []})
        api.request_json("GET", "/api/streams/my")
        http.request.assert_called_once_with("GET", "http://queue.test/api/streams/my", timeout=5)

    def test_connection_error_is_network_error(self, api, http):
        http.request.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(FetchError) as exc_info:
            api.request_json("GET", "/api/streams/my", error_cls=FetchError)
        assert exc_info.value.is_network_error
        assert exc_info.value.status_code is None

    def test_http_error_carries_status(self, api, http):
        http.request.return_value = make_response({"message": "nope"}, status_code=403)
        with pytest.raises(VoteError) as exc_info:
            api.request_json("POST", "/api/streams/upvote", error_cls=VoteError)
        assert exc_info.value.status_code == 403
        assert not exc_info.value.is_network_error

    def test_invalid_json(self, api, http):
        http.request.return_value = make_response(invalid_json=True)
        with pytest.raises(FetchError):
            api.request_json("GET", "/api/streams/my", error_cls=FetchError)


class TestVoteLedgerClient:
    """Test vote submission"""

    def test_upvote(self, api, http):
        http.request.return_value = make_response({"message": "Done!"})
        receipt = VoteLedgerClient(api).submit_vote("dQw4w9WgXcQ", VoteDirection.UPVOTE)

        http.request.assert_called_once_with(
            "POST",
            "http://queue.test/api/streams/upvote",
            json={"streamId": "dQw4w9WgXcQ"},
            timeout=5,
        )
        assert receipt.item_id == "dQw4w9WgXcQ"
        assert receipt.direction is VoteDirection.UPVOTE
        assert receipt.message == "Done!"

    def test_downvote_path(self, api, http):
        http.request.return_value = make_response({})
        VoteLedgerClient(api).submit_vote("dQw4w9WgXcQ", VoteDirection.DOWNVOTE)
        assert http.request.call_args.args[1] == "http://queue.test/api/streams/downvote"

    def test_rejected_vote_raises(self, api, http):
        http.request.return_value = make_response({"message": "Error"}, status_code=500)
        with pytest.raises(VoteError):
            VoteLedgerClient(api).submit_vote("dQw4w9WgXcQ", VoteDirection.UPVOTE)

    def test_timeout_raises_vote_error(self, api, http):
        http.request.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(VoteError) as exc_info:
            VoteLedgerClient(api).submit_vote("dQw4w9WgXcQ", VoteDirection.UPVOTE)
        assert exc_info.value.is_network_error


class TestQueueFetchClient:
    """Test queue snapshot retrieval"""

    def test_fetch_queue(self, api, http, sample_stream_data):
        http.request.return_value = make_response({"streams": [sample_stream_data, {"id": "b", "title": "Other"}]})

        items = QueueFetchClient(api).fetch_queue()

        assert [item.id for item in items] == ["dQw4w9WgXcQ", "b"]
        assert items[0].score == 3
        assert items[0].voted_by_local_user is True

    def test_malformed_entries_skipped(self, api, http, sample_stream_data):
        http.request.return_value = make_response({"streams": ["junk", {"title": "no id"}, sample_stream_data]})
        items = QueueFetchClient(api).fetch_queue()
        assert [item.id for item in items] == ["dQw4w9WgXcQ"]

    @pytest.mark.parametrize("payload", [{}, {"streams": None}, {"streams": "x"}, []])
    def test_missing_streams_list(self, api, http, payload):
        http.request.return_value = make_response(payload)
        with pytest.raises(FetchError):
            QueueFetchClient(api).fetch_queue()

    def test_network_failure(self, api, http):
        http.request.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(FetchError):
            QueueFetchClient(api).fetch_queue()
