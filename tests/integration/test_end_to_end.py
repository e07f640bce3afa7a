"""End-to-end tests of the resolution flow with the HTTP layer mocked."""

import pytest
import requests
from unittest.mock import Mock, patch

from site_resolver.core.config import SearchConfig
from site_resolver.core.models import STATUS_COMPLETE
from site_resolver.filtering.blacklist import DomainBlacklist
from site_resolver.resolution.resolver import CompanyWebsiteResolver, resolve_company
from site_resolver.search.queries import generate_domain_guesses, generate_search_queries


def search_response(items=None, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.text = ""
    response.json.return_value = {"items": items} if items is not None else {}
    return response


class TestEndToEnd:
    """Scenarios covering search, filtering, fallback and ranking together."""

    @pytest.fixture
    def config(self):
        return SearchConfig(api_key="test_api_key_123", search_engine_id="engine-1")

    @pytest.fixture
    def sleeps(self):
        return []

    @pytest.fixture
    def resolver(self, config, sleeps):
        return CompanyWebsiteResolver(config, sleep=sleeps.append)

    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_search_hit(self, mock_get, mock_head, resolver):
        mock_get.return_value = search_response([
            {"title": "Acme - site oficial", "link": "https://acme.com.br", "snippet": ""},
        ])

        outcome = resolver.resolve_company("Acme Ltda")

        assert outcome.status == STATUS_COMPLETE
        assert [link.link for link in outcome.links] == ["https://acme.com.br"]
        assert outcome.links[0].domain == "acme.com.br"
        mock_head.assert_not_called()

    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_direct_probe_fallback(self, mock_get, mock_head, resolver):
        mock_get.return_value = search_response([])
        mock_head.return_value = Mock(status_code=200)

        outcome = resolver.resolve_company("Acme Ltda")

        assert len(outcome.links) == 1
        assert outcome.links[0].title == "Acme Ltda - Site Oficial"
        assert outcome.links[0].domain == "acmeltda.com.br"
        assert mock_head.call_args.args[0] == "https://acmeltda.com.br"

    @pytest.mark.parametrize("name", ["OLX", "Glassdoor", "YouTube", "Facebook"])
    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_probe_never_returns_blacklisted_domain(self, mock_get, mock_head, resolver, name):
        slug = name.lower()
        mock_get.return_value = search_response([
            {"title": name, "link": f"https://{slug}.com.br/x"},
            {"title": name, "link": f"https://www.facebook.com/{slug}"},
        ])
        mock_head.return_value = Mock(status_code=200)
        blacklist = DomainBlacklist()

        outcome = resolver.resolve_company(name)

        assert outcome.status == STATUS_COMPLETE
        assert len(outcome.links) == 1
        assert outcome.links[0].title == f"{name} - Site Oficial"
        assert not any(blacklist.is_blacklisted(link.domain) for link in outcome.links)
        probed = [call.args[0] for call in mock_head.call_args_list]
        assert not any(blacklist.is_blacklisted_url(url) for url in probed)

    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_synthetic_suggestion(self, mock_get, mock_head, resolver):
        mock_get.side_effect = requests.ConnectionError("offline")
        mock_head.side_effect = requests.ConnectionError("offline")

        outcome = resolver.resolve_company("Acme Ltda")

        assert outcome.status == STATUS_COMPLETE
        assert len(outcome.links) == 1
        assert outcome.links[0].link == "https://acmeltda.com.br"
        assert "Sugerido" in outcome.links[0].title
        assert mock_head.call_count == len(generate_domain_guesses("Acme Ltda"))

    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_rate_limit_recovery(self, mock_get, mock_head, resolver, sleeps):
        ok = search_response([{"title": "Acme", "link": "https://acme.com.br"}])
        mock_get.side_effect = [search_response(status_code=429), search_response(status_code=429)] + [ok] * 20

        outcome = resolver.resolve_company("Acme")

        assert outcome.links[0].link == "https://acme.com.br"
        # first backoff is 1s plus jitter, second 2s plus jitter
        assert mock_get.call_count >= 3
        assert 1.0 <= sleeps[0] < 1.5
        assert 2.0 <= sleeps[1] < 2.5

    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_blacklisted_only(self, mock_get, mock_head, resolver):
        mock_get.return_value = search_response([
            {"title": "Acme | Facebook", "link": "https://facebook.com/acme"},
            {"title": "Acme - LinkedIn", "link": "https://br.linkedin.com/company/acme"},
        ])
        mock_head.side_effect = requests.Timeout("slow")

        outcome = resolver.resolve_company("Acme")

        assert mock_get.call_count == len(generate_search_queries("Acme"))
        assert [link.link for link in outcome.links] == ["https://acme.com.br"]
        assert "Sugerido" in outcome.links[0].title

    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_network_calls_bounded(self, mock_get, mock_head, config, sleeps):
        mock_get.return_value = search_response(status_code=429)
        mock_head.side_effect = requests.ConnectionError("offline")
        name = "Acme Ltda"

        outcome = resolve_company(name, config, sleep=sleeps.append)

        queries = len(generate_search_queries(name))
        guesses = len(generate_domain_guesses(name))
        assert mock_get.call_count == queries * (1 + config.max_retries)
        assert mock_head.call_count == guesses
        assert outcome.links[0].link == "https://acmeltda.com.br"

    @patch('site_resolver.resolution.fallback.requests.head')
    @patch('site_resolver.search.client.requests.get')
    def test_idempotent(self, mock_get, mock_head, config):
        mock_get.return_value = search_response([
            {"title": "Acme Imóveis", "link": "https://acmeimoveis.com"},
            {"title": "Acme oficial", "link": "https://acme.com.br"},
            {"title": "Acme", "link": "https://acme.com.br"},
        ])

        first = resolve_company("Acme", config, sleep=lambda _: None)
        second = resolve_company("Acme", config, sleep=lambda _: None)

        assert first == second
        assert [link.link for link in first.links] == ["https://acme.com.br", "https://acmeimoveis.com"]

    @patch('site_resolver.search.client.requests.get')
    def test_max_links_respected(self, mock_get, sleeps):
        config = SearchConfig(api_key="k", search_engine_id="e", max_links_per_company=2)
        mock_get.return_value = search_response([
            {"title": f"Site {i}", "link": f"https://site{i}.com.br"} for i in range(6)
        ])

        outcome = resolve_company("Acme", config, sleep=sleeps.append)

        assert len(outcome.links) == 2
        assert mock_get.call_count == 1
