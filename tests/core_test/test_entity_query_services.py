# tests/core_test/test_entity_query_services.py

import pytest

from schema_api.models.entity import Entity

from viewer_services.filter_service import NamespaceFilterService
from viewer_services.search_service import SearchService
from viewer_services.exceptions import NamespaceFilterError, SearchQueryError


@pytest.fixture
def namespace_filter():
    return NamespaceFilterService()


@pytest.fixture
def search():
    return SearchService()


@pytest.fixture
def mixed_entities():
    """Namespace A with 3 entities, namespace B with 2."""
    return [
        Entity("a1", "Invoice", "A"),
        Entity("b1", "Ledger", "B"),
        Entity("a2", "InvoiceLine", "A"),
        Entity("a3", "Payment", "A"),
        Entity("b2", "Account", "B"),
    ]


class TestNamespaceFilter:

    def test_filter_keeps_selected_namespace_only(self, namespace_filter, mixed_entities):
        result = namespace_filter.filter(mixed_entities, {"A"})
        assert len(result) == 3
        assert all(e.namespace == "A" for e in result)

    def test_filter_preserves_order(self, namespace_filter, mixed_entities):
        result = namespace_filter.filter(mixed_entities, frozenset({"A", "B"}))
        assert [e.entity_id for e in result] == ["a1", "b1", "a2", "a3", "b2"]

    def test_empty_selection_keeps_nothing(self, namespace_filter, mixed_entities):
        assert namespace_filter.filter(mixed_entities, set()) == []

    def test_unknown_namespace(self, namespace_filter, mixed_entities):
        assert namespace_filter.filter(mixed_entities, {"Z"}) == []

    @pytest.mark.parametrize("query", ["A", ["A"], None, 3])
    def test_non_set_selection_raises(self, namespace_filter, mixed_entities, query):
        with pytest.raises(NamespaceFilterError):
            namespace_filter.filter(mixed_entities, query)

    def test_matching_ids(self, namespace_filter, mixed_entities):
        assert namespace_filter.matching_ids(mixed_entities, {"B"}) == {"b1", "b2"}


class TestSearch:

    def test_empty_term_matches_all(self, search, mixed_entities):
        assert search.search(mixed_entities, "") == mixed_entities

    @pytest.mark.parametrize("term", ["invoice", "INVOICE", "InVoIcE"])
    def test_case_insensitive(self, search, mixed_entities, term):
        assert [e.entity_id for e in search.search(mixed_entities, term)] == ["a1", "a2"]

    def test_matches_namespace_name(self, search, mixed_entities):
        assert {e.entity_id for e in search.search(mixed_entities, "b")} == {"b1", "b2"}

    def test_substring(self, search, mixed_entities):
        assert [e.entity_id for e in search.search(mixed_entities, "ymen")] == ["a3"]

    def test_no_match(self, search, mixed_entities):
        assert search.search(mixed_entities, "zzz") == []

    @pytest.mark.parametrize("term", [None, 5, ["x"]])
    def test_non_string_raises(self, search, mixed_entities, term):
        with pytest.raises(SearchQueryError):
            search.search(mixed_entities, term)
