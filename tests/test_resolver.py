"""Tests for entity resolution."""

import asyncio

import pytest
from conftest import FakeUpstreamClient, search_hit

from rootscope.analysis import (
    AnalysisError,
    EntityKind,
    EntityResolver,
    ExactNameStrategy,
    FirstResultStrategy,
    NotFoundError,
    get_strategy,
)


class TestEntityKind:
    """Test search type codes."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (1, EntityKind.PROJECT),
            (2, EntityKind.INVESTOR),
            (3, EntityKind.PERSON),
            ("2", EntityKind.INVESTOR),
            (4, EntityKind.UNCLASSIFIED),
            (None, EntityKind.UNCLASSIFIED),
            ("vc", EntityKind.UNCLASSIFIED),
        ],
    )
    def test_from_code(self, code, expected: EntityKind) -> None:
        """Test codes map to kinds, unknown codes to Unclassified."""
        assert EntityKind.from_code(code) is expected


class TestEntityResolver:
    """Test EntityResolver.resolve."""

    def test_first_hit_is_canonical(self) -> None:
        """Test the first search result wins without ranking."""
        client = FakeUpstreamClient(
            {"ser_inv": [search_hit(99, "Ethereum Fdn", 2), search_hit(12, "Ethereum", 1)]}
        )
        entity = asyncio.run(EntityResolver(client).resolve("ethereum"))

        assert entity.id == 99
        assert entity.display_name == "Ethereum Fdn"
        assert entity.kind is EntityKind.INVESTOR
        assert client.calls == [("ser_inv", {"query": "ethereum"})]

    def test_empty_result_raises_not_found(self) -> None:
        """Test a miss raises NotFoundError after a single call."""
        client = FakeUpstreamClient({"ser_inv": []})

        with pytest.raises(NotFoundError, match="No entity found for 'nothing'"):
            asyncio.run(EntityResolver(client).resolve("nothing"))
        assert client.endpoints == ["ser_inv"]

    def test_non_list_result_is_a_miss(self) -> None:
        """Test an unexpected payload shape counts as no hits."""
        client = FakeUpstreamClient({"ser_inv": {"items": []}})
        with pytest.raises(NotFoundError):
            asyncio.run(EntityResolver(client).resolve("x"))

    def test_hit_without_id_raises(self) -> None:
        """Test a hit with no usable id is rejected."""
        client = FakeUpstreamClient({"ser_inv": [{"name": "Ghost", "type": 1}]})
        with pytest.raises(AnalysisError, match="no valid id"):
            asyncio.run(EntityResolver(client).resolve("ghost"))

    def test_missing_name_falls_back_to_query(self) -> None:
        """Test the query is used as display name when the hit has none."""
        client = FakeUpstreamClient({"ser_inv": [{"id": 3, "type": 9}]})
        entity = asyncio.run(EntityResolver(client).resolve("anon"))

        assert entity.display_name == "anon"
        assert entity.kind is EntityKind.UNCLASSIFIED

    def test_exact_name_strategy_prefers_name_match(self) -> None:
        """Test exact_name picks a case-insensitive name match."""
        client = FakeUpstreamClient(
            {"ser_inv": [search_hit(99, "Ethereum Fdn", 2), search_hit(12, "Ethereum", 1)]}
        )
        entity = asyncio.run(EntityResolver(client, ExactNameStrategy()).resolve("ETHEREUM"))
        assert entity.id == 12


class TestStrategies:
    """Test strategy lookup."""

    def test_known_names(self) -> None:
        """Test both strategies are registered."""
        assert isinstance(get_strategy("first_result"), FirstResultStrategy)
        assert isinstance(get_strategy("exact_name"), ExactNameStrategy)

    def test_unknown_name_raises(self) -> None:
        """Test unknown strategy names are rejected."""
        with pytest.raises(ValueError, match="Unknown resolution strategy"):
            get_strategy("fuzzy")  # type: ignore[arg-type]

    def test_exact_name_falls_back_to_first(self) -> None:
        """Test exact_name behaves like first_result without a match."""
        hits = [search_hit(1, "A", 1), search_hit(2, "B", 1)]
        assert ExactNameStrategy().choose("C", hits) == hits[0]
