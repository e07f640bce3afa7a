import requests
from unittest.mock import Mock, patch

from site_resolver.core.config import SearchConfig
from site_resolver.filtering.blacklist import DomainBlacklist
from site_resolver.resolution.fallback import FallbackResolver


def head_response(status_code):
    response = Mock()
    response.status_code = status_code
    return response


class TestFallbackResolver:
    """Test suite for the direct probe and suggestion fallback."""

    def setup_method(self):
        self.config = SearchConfig(api_key="key", search_engine_id="engine")
        self.fallback = FallbackResolver(self.config)

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_first_successful_probe_wins(self, mock_head):
        mock_head.side_effect = [
            requests.ConnectionError("no such host"),
            head_response(200),
            head_response(200),
        ]

        results = self.fallback.probe_domains("Acme", ["acme.com.br", "acme.com", "acme.net"])

        assert len(results) == 1
        assert results[0].link == "https://acme.com"
        assert results[0].domain == "acme.com"
        assert results[0].title == "Acme - Site Oficial"
        assert mock_head.call_count == 2

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_probe_uses_timeout(self, mock_head):
        mock_head.return_value = head_response(301)

        self.fallback.probe_domains("Acme", ["acme.com.br"])

        args, kwargs = mock_head.call_args
        assert args[0] == "https://acme.com.br"
        assert kwargs["timeout"] == 5.0

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_error_statuses_rejected(self, mock_head):
        mock_head.side_effect = [head_response(404), head_response(500), requests.Timeout("slow")]

        assert self.fallback.probe_domains("Acme", ["a.com.br", "a.com", "a.net"]) == []
        assert mock_head.call_count == 3

    def test_suggestion(self):
        suggestion = self.fallback.suggest("Acme Ltda.")

        assert suggestion.link == "https://acmeltda.com.br"
        assert suggestion.domain == "acmeltda.com.br"
        assert "Sugerido" in suggestion.title
        assert "Oficial" not in suggestion.title
        assert "sugerido" in suggestion.snippet

    def test_suggestion_for_unusable_name(self):
        assert self.fallback.suggest("!!!") is None

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_resolve_falls_through_to_suggestion(self, mock_head):
        mock_head.side_effect = requests.ConnectionError("down")

        results = self.fallback.resolve("Acme Ltda", ["acmeltda.com.br", "acmeltda.com"])

        assert [r.link for r in results] == ["https://acmeltda.com.br"]
        assert "Sugerido" in results[0].title

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_resolve_prefers_probe(self, mock_head):
        mock_head.return_value = head_response(200)

        results = self.fallback.resolve("Acme Ltda", ["acmeltda.com.br"])

        assert results[0].title == "Acme Ltda - Site Oficial"

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_blacklisted_guesses_not_probed(self, mock_head):
        mock_head.return_value = head_response(200)

        results = self.fallback.probe_domains("OLX", ["olx.com.br", "olx.com"])

        assert [r.link for r in results] == ["https://olx.com"]
        assert mock_head.call_count == 1
        assert mock_head.call_args.args[0] == "https://olx.com"

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_only_blacklisted_guesses_fall_through_to_suggestion(self, mock_head):
        results = self.fallback.resolve("Facebook", ["facebook.com.br", "facebook.com"])

        mock_head.assert_not_called()
        assert [r.link for r in results] == ["https://facebook.com.br"]
        assert "Sugerido" in results[0].title

    @patch('site_resolver.resolution.fallback.requests.head')
    def test_custom_blacklist(self, mock_head):
        mock_head.return_value = head_response(200)
        fallback = FallbackResolver(self.config, blacklist=DomainBlacklist(["acme.com.br"]))

        results = fallback.probe_domains("Acme", ["acme.com.br", "acme.com"])

        assert results[0].domain == "acme.com"
