"""
Tests for statmind/adapters
===========================
Reasoning providers and the live scoreboard, with HTTP mocked out.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from statmind.adapters.anthropic_adapter import AnthropicAdapter
from statmind.adapters.base import ProviderRegistry
from statmind.adapters.mock_adapter import MockAdapter
from statmind.adapters.scoreboard_adapter import LiveScoreboard, ScoreboardAdapter
from statmind.errors import ProviderError, RefreshError
from statmind.schemas.provider import LiveGameDTO


def _response(status_code=200, body=None, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body if body is not None else {}
    return response


class TestProviderRegistry:
    def test_builtin_providers_registered(self):
        providers = ProviderRegistry.list_providers()
        assert "anthropic" in providers
        assert "mock" in providers

    def test_get_adapter(self):
        adapter = ProviderRegistry.get_adapter("mock", timeout=2.5)
        assert isinstance(adapter, MockAdapter)
        assert adapter.timeout == 2.5
        assert adapter.provider_name == "mock"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            ProviderRegistry.get_adapter("nope")


class TestAnthropicAdapter:
    """Every failure mode surfaces as ProviderError"""

    @pytest.fixture
    def adapter(self):
        return AnthropicAdapter(api_key="sk-test", timeout=4.0, model="test-model")

    @patch("statmind.adapters.anthropic_adapter.requests.post")
    def test_success(self, mock_post, adapter):
        mock_post.return_value = _response(body={
            "content": [
                {"type": "text", "text": "Kansas City controls the line. "},
                {"type": "text", "text": "Expect a two-score win."},
            ]
        })

        text = adapter.generate("prompt")

        assert text == "Kansas City controls the line. Expect a two-score win."
        _, kwargs = mock_post.call_args
        assert kwargs["timeout"] == 4.0
        assert kwargs["headers"]["x-api-key"] == "sk-test"
        assert kwargs["json"]["model"] == "test-model"
        assert kwargs["json"]["messages"] == [{"role": "user", "content": "prompt"}]

    @patch("statmind.adapters.anthropic_adapter.requests.post")
    def test_timeout(self, mock_post, adapter):
        mock_post.side_effect = requests.Timeout("slow")
        with pytest.raises(ProviderError, match="timed out"):
            adapter.generate("prompt")

    @patch("statmind.adapters.anthropic_adapter.requests.post")
    def test_network_error(self, mock_post, adapter):
        mock_post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ProviderError, match="Request failed"):
            adapter.generate("prompt")

    @patch("statmind.adapters.anthropic_adapter.requests.post")
    def test_rate_limited(self, mock_post, adapter):
        mock_post.return_value = _response(status_code=429)
        with pytest.raises(ProviderError) as exc_info:
            adapter.generate("prompt")
        assert exc_info.value.status_code == 429
        assert exc_info.value.provider == "anthropic"

    @patch("statmind.adapters.anthropic_adapter.requests.post")
    def test_malformed_body(self, mock_post, adapter):
        mock_post.return_value = _response(json_error=ValueError("not json"))
        with pytest.raises(ProviderError, match="Malformed"):
            adapter.generate("prompt")

    @patch("statmind.adapters.anthropic_adapter.requests.post")
    def test_empty_text(self, mock_post, adapter):
        mock_post.return_value = _response(body={"content": [{"type": "text", "text": "   "}]})
        with pytest.raises(ProviderError, match="empty"):
            adapter.generate("prompt")

    @patch("statmind.adapters.anthropic_adapter.requests.post")
    def test_missing_key_never_calls_out(self, mock_post):
        with pytest.raises(ProviderError, match="No API key"):
            AnthropicAdapter(api_key=None).generate("prompt")
        mock_post.assert_not_called()


ESPN_PAYLOAD = {
    "events": [
        {
            "id": "401",
            "date": "2025-10-19T17:00Z",
            "status": {"type": {"state": "in", "completed": False, "shortDetail": "Q3 4:12"}},
            "competitions": [{
                "competitors": [
                    {"homeAway": "home", "score": "17", "team": {"abbreviation": "KC"}},
                    {"homeAway": "away", "score": "10", "team": {"abbreviation": "BUF"}},
                ]
            }],
        },
        {
            "id": "402",
            "date": "2025-10-19T20:25Z",
            "status": {"type": {"state": "pre", "completed": False, "shortDetail": "4:25 PM"}},
            "competitions": [{
                "competitors": [
                    {"homeAway": "home", "score": "0", "team": {"abbreviation": "DAL"}},
                    {"homeAway": "away", "score": "0", "team": {"abbreviation": "PHI"}},
                ]
            }],
        },
        {
            "id": "403",
            "status": {"type": {"state": "post", "completed": True}},
            "competitions": [{"competitors": [{"homeAway": "home", "team": {"abbreviation": "NYJ"}}]}],
        },
    ]
}


class TestScoreboardAdapter:
    @patch("statmind.adapters.scoreboard_adapter.requests.get")
    def test_parses_events(self, mock_get):
        mock_get.return_value = _response(body=ESPN_PAYLOAD)

        games = ScoreboardAdapter(url="http://scoreboard.test", timeout=3).fetch_games()

        mock_get.assert_called_once_with("http://scoreboard.test", timeout=3)
        # Event 403 has no away competitor and is skipped
        assert [g.external_id for g in games] == ["401", "402"]

        live, upcoming = games
        assert (live.home_team, live.away_team) == ("KC", "BUF")
        assert (live.home_score, live.away_score) == (17, 10)
        assert live.is_live
        assert live.status_detail == "Q3 4:12"
        assert live.kickoff_time.year == 2025

        assert upcoming.home_score is None
        assert not upcoming.is_live

    @patch("statmind.adapters.scoreboard_adapter.requests.get")
    def test_http_error(self, mock_get):
        mock_get.return_value = _response(status_code=503)
        with pytest.raises(RefreshError, match="503"):
            ScoreboardAdapter().fetch_games()

    @patch("statmind.adapters.scoreboard_adapter.requests.get")
    def test_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("down")
        with pytest.raises(RefreshError):
            ScoreboardAdapter().fetch_games()

    @patch("statmind.adapters.scoreboard_adapter.requests.get")
    def test_invalid_json(self, mock_get):
        mock_get.return_value = _response(json_error=ValueError("bad"))
        with pytest.raises(RefreshError, match="invalid JSON"):
            ScoreboardAdapter().fetch_games()


class TestLiveScoreboard:
    def _board(self, games):
        adapter = Mock()
        adapter.fetch_games.return_value = games
        board = LiveScoreboard(adapter)
        board.refresh()
        return board

    def test_refresh_stores_games(self):
        game = LiveGameDTO(external_id="1", home_team="KC", away_team="BUF")
        board = self._board([game])
        assert board.games == [game]
        assert board.fetched_at is not None

    def test_all_final(self):
        board = self._board([
            LiveGameDTO(external_id="1", home_team="KC", away_team="BUF", home_score=24, away_score=21, is_final=True),
            LiveGameDTO(external_id="2", home_team="DAL", away_team="PHI", home_score=3, away_score=7),
        ])
        assert not board.all_final()
        assert board.has_live_games()

        board.games[1] = board.games[1].model_copy(update={"is_final": True})
        assert board.all_final()
        assert not board.has_live_games()

    def test_empty_board_counts_as_final(self):
        assert self._board([]).all_final()

    def test_unfetched_board_is_unknown(self):
        board = LiveScoreboard(Mock())
        assert board.all_final() is None
        assert board.has_live_games() is False

    def test_failed_refresh_keeps_previous_games(self):
        game = LiveGameDTO(external_id="1", home_team="KC", away_team="BUF")
        board = self._board([game])
        board.adapter.fetch_games.side_effect = RefreshError("down")
        with pytest.raises(RefreshError):
            board.refresh()
        assert board.games == [game]
