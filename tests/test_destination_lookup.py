"""
Test Destination Lookup Chain

uuid -> legacy id -> slug -> name resolution used by /api/destinations/{id}.
"""
import asyncio

import pytest

from slctrips.services.destination_repository import legacy_id_value, name_pattern, resolve_first
from conftest import ARCHES_ID, PARK_CITY_ID, TEMPLE_SQUARE_ID


def run(coro):
    return asyncio.run(coro)


class TestResolveFirst:

    def test_short_circuits_on_first_hit(self):
        calls = []

        def stage(name, result):
            async def lookup(identifier):
                calls.append(name)
                return result
            return lookup

        found = run(resolve_first("x", [stage("a", None), stage("b", "hit"), stage("c", "other")]))

        assert found == "hit"
        assert calls == ["a", "b"]

    def test_returns_none_when_every_stage_misses(self):
        async def miss(identifier):
            return None

        assert run(resolve_first("x", [miss, miss])) is None
        assert run(resolve_first("x", [])) is None


class TestFetchById:

    def test_uuid_match(self, destination_repo):
        found = run(destination_repo.fetch_by_id(PARK_CITY_ID))
        assert found.name == "Park City Main Street"
        assert destination_repo.stages_called == ["uuid"]

    def test_legacy_integer_id(self, destination_repo):
        found = run(destination_repo.fetch_by_id("17"))
        assert found.name == "Temple Square"
        assert destination_repo.stages_called == ["uuid", "legacy_id"]

    def test_slug_after_uuid_and_integer_miss(self, destination_repo):
        """An id that is neither a uuid nor a number but equals a stored slug"""
        found = run(destination_repo.fetch_by_id("arches-national-park"))
        assert str(found.id) == ARCHES_ID
        assert destination_repo.stages_called == ["uuid", "legacy_id", "slug"]

    def test_fuzzy_name_fallback(self, destination_repo):
        """Temple Square has no slug, so its slug-like id resolves by name"""
        found = run(destination_repo.fetch_by_id("temple-square"))
        assert str(found.id) == TEMPLE_SQUARE_ID
        assert destination_repo.stages_called == ["uuid", "legacy_id", "slug", "name"]

    def test_not_found_after_all_stages(self, destination_repo):
        assert run(destination_repo.fetch_by_id("bonneville-salt-flats")) is None
        assert destination_repo.stages_called == ["uuid", "legacy_id", "slug", "name"]

    @pytest.mark.parametrize("identifier", ["\u00b2", "20241031123"])
    def test_unusable_numeric_id_falls_through_to_slug_and_name(self, destination_repo, identifier):
        """Non-ASCII digits and values past the integer column never reach the id query"""
        assert run(destination_repo.fetch_by_id(identifier)) is None
        assert destination_repo.stages_called == ["uuid", "legacy_id", "slug", "name"]

    def test_unknown_uuid_is_not_found(self, destination_repo):
        assert run(destination_repo.fetch_by_id("00000000-0000-0000-0000-000000000000")) is None


class TestNamePattern:

    def test_hyphens_become_spaces(self):
        assert name_pattern("temple-square") == "%temple square%"

    def test_whitespace_is_collapsed(self):
        assert name_pattern("  park   city- ") == "%park city%"

    def test_like_wildcards_are_escaped(self):
        assert name_pattern("100%_fun") == "%100\\%\\_fun%"


class TestLegacyIdValue:

    def test_plain_digits(self):
        assert legacy_id_value("17") == 17
        assert legacy_id_value("2147483647") == 2147483647

    @pytest.mark.parametrize("identifier", ["²", "١٢", "2147483648", "20241031123", "-3", "1.5", ""])
    def test_rejected(self, identifier):
        assert legacy_id_value(identifier) is None
