from site_resolver.core.models import RawSearchItem, CandidateResult
from site_resolver.filtering.blacklist import DomainBlacklist
from site_resolver.filtering.results import filter_items, deduplicate, count_distinct_domains


def candidate(link, domain=None, title="T"):
    return CandidateResult(title=title, link=link, snippet="", domain=domain or link.split("//")[1])


class TestFilterItems:
    """Test suite for raw item filtering."""

    def setup_method(self):
        self.blacklist = DomainBlacklist()

    def test_domain_extracted(self):
        items = [RawSearchItem("Acme", "https://www.acme.com.br/sobre", "Sobre nós")]

        result = filter_items(items, self.blacklist)

        assert result == [CandidateResult("Acme", "https://www.acme.com.br/sobre", "Sobre nós", "acme.com.br")]

    def test_missing_link_or_title_dropped(self):
        items = [
            RawSearchItem("", "https://acme.com.br"),
            RawSearchItem("Acme", ""),
            RawSearchItem("Acme", "https://acme.com.br"),
        ]

        assert [c.link for c in filter_items(items, self.blacklist)] == ["https://acme.com.br"]

    def test_blacklisted_dropped(self):
        items = [
            RawSearchItem("Acme | Facebook", "https://facebook.com/acme"),
            RawSearchItem("Acme - CNPJ", "https://cnpj.biz/0001"),
        ]

        assert filter_items(items, self.blacklist) == []

    def test_unparsable_link_dropped(self):
        items = [RawSearchItem("Broken", "not a url")]
        assert filter_items(items, self.blacklist) == []

    def test_order_preserved(self):
        items = [
            RawSearchItem("B", "https://b.com.br"),
            RawSearchItem("A", "https://a.com.br"),
        ]
        assert [c.domain for c in filter_items(items, self.blacklist)] == ["b.com.br", "a.com.br"]


class TestDeduplicate:

    def test_first_occurrence_wins(self):
        first = candidate("https://acme.com.br", title="First")
        second = candidate("https://acme.com.br", title="Second")
        other = candidate("https://other.com.br")

        result = deduplicate([first, other, second])

        assert result == [first, other]

    def test_no_duplicate_links(self):
        links = ["https://a.com", "https://b.com", "https://a.com", "https://c.com", "https://b.com"]
        result = deduplicate([candidate(link) for link in links])

        result_links = [c.link for c in result]
        assert len(result_links) == len(set(result_links)) == 3

    def test_same_domain_different_links_kept(self):
        result = deduplicate([
            candidate("https://acme.com.br", "acme.com.br"),
            candidate("https://acme.com.br/contato", "acme.com.br"),
        ])
        assert len(result) == 2
        assert count_distinct_domains(result) == 1

    def test_empty(self):
        assert deduplicate([]) == []
