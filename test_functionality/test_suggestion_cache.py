"""
Unit tests for the fingerprint-keyed suggestion cache.

Verifies:
1. A hit never calls the generator
2. A miss calls it exactly once and persists the result
3. Generator failure returns the fallback without persisting it
4. Conditional writes never overwrite a newer record
5. Both store implementations honour the same contract
"""
import pytest

from domain.fingerprint import context_fingerprint
from domain.models import SuggestionBundle
from application.services.suggestions import SuggestionService
from infrastructure.persistence.memory_cache_store import InMemorySuggestionCacheStore
from infrastructure.persistence.suggestion_cache_store import SQLiteSuggestionCacheStore

from conftest import CONTEXT_BUNDLE, FakeSuggestionGenerator, make_entry


@pytest.fixture(params=["memory", "sqlite"])
def store(request, factory):
    if request.param == "memory":
        return InMemorySuggestionCacheStore()
    return SQLiteSuggestionCacheStore(factory._connection)


@pytest.fixture
def generator():
    return FakeSuggestionGenerator()


@pytest.fixture
def service(store, generator):
    return SuggestionService(store=store, generator=generator)


def _entries(*ids):
    return [make_entry(i, f"You felt something on day {i}.") for i in ids]


class TestSuggestionService:

    @pytest.mark.asyncio
    async def test_no_entries_returns_empty_without_ai(self, service, generator, alice):
        bundle = await service.get_suggestions(alice, [])
        assert bundle == SuggestionBundle.empty()
        assert generator.context_calls == []

    @pytest.mark.asyncio
    async def test_miss_generates_once_and_persists(self, service, store, generator, alice):
        entries = _entries(3, 2, 1)
        bundle = await service.get_suggestions(alice, entries)

        assert bundle == CONTEXT_BUNDLE
        assert len(generator.context_calls) == 1
        cached = await store.get(alice.user_id)
        assert cached.fingerprint == str(context_fingerprint(entries))
        assert cached.suggestions == CONTEXT_BUNDLE
        assert cached.updated_at

    @pytest.mark.asyncio
    async def test_hit_never_calls_generator(self, service, generator, alice):
        entries = _entries(3, 2, 1)
        await service.get_suggestions(alice, entries)
        second = await service.get_suggestions(alice, entries)
        third = await service.get_suggestions(alice, entries)

        assert second == third == CONTEXT_BUNDLE
        assert len(generator.context_calls) == 1

    @pytest.mark.asyncio
    async def test_only_newest_three_are_sent_and_fingerprinted(self, service, generator, alice):
        await service.get_suggestions(alice, _entries(5, 4, 3, 2, 1))
        assert [e.id for e in generator.context_calls[0]] == [5, 4, 3]

        # An older entry disappearing does not change the context
        await service.get_suggestions(alice, _entries(5, 4, 3))
        assert len(generator.context_calls) == 1

    @pytest.mark.asyncio
    async def test_context_change_regenerates(self, service, generator, alice):
        await service.get_suggestions(alice, _entries(3, 2, 1))
        generator.context_bundle = SuggestionBundle(
            activities=["Swim"], movies=["Coco"], songs=["Vida"], food=["Soup"],
        )
        bundle = await service.get_suggestions(alice, _entries(4, 3, 2))

        assert bundle.activities == ["Swim"]
        assert len(generator.context_calls) == 2

    @pytest.mark.asyncio
    async def test_incomplete_cached_bundle_is_regenerated(self, service, store, generator, alice):
        entries = _entries(2, 1)
        fingerprint = str(context_fingerprint(entries))
        partial = SuggestionBundle(activities=["Walk"])
        assert await store.put(alice.user_id, fingerprint, partial, expected_fingerprint=None)

        bundle = await service.get_suggestions(alice, entries)
        assert bundle == CONTEXT_BUNDLE
        assert len(generator.context_calls) == 1
        assert (await store.get(alice.user_id)).suggestions == CONTEXT_BUNDLE

    @pytest.mark.asyncio
    async def test_failure_returns_fallback_and_does_not_persist(self, service, store, generator, alice):
        generator.error = ConnectionError("model offline")
        bundle = await service.get_suggestions(alice, _entries(1))

        assert bundle == SuggestionBundle.fallback()
        cached = await store.get(alice.user_id)
        assert cached is None or cached.fingerprint is None

        # Next request tries again instead of serving the fallback
        generator.error = None
        assert await service.get_suggestions(alice, _entries(1)) == CONTEXT_BUNDLE
        assert len(generator.context_calls) == 2

    @pytest.mark.asyncio
    async def test_malformed_response_returns_fallback(self, service, store, generator, alice):
        generator.malformed = True
        bundle = await service.get_suggestions(alice, _entries(1))
        assert bundle == SuggestionBundle.fallback()
        cached = await store.get(alice.user_id)
        assert cached is None or cached.suggestions is None

    @pytest.mark.asyncio
    async def test_invalidate_forces_regeneration(self, service, store, generator, alice):
        entries = _entries(2, 1)
        await service.get_suggestions(alice, entries)
        await service.clear_cache(alice)

        cached = await store.get(alice.user_id)
        assert cached is None or cached.fingerprint is None

        await service.get_suggestions(alice, entries)
        assert len(generator.context_calls) == 2

    @pytest.mark.asyncio
    async def test_accounts_are_cached_separately(self, service, generator, alice, bob):
        await service.get_suggestions(alice, _entries(1))
        await service.get_suggestions(bob, _entries(1))
        assert len(generator.context_calls) == 2


class TestConditionalPut:

    @pytest.mark.asyncio
    async def test_put_rejected_when_fingerprint_moved_on(self, store, alice):
        newer = SuggestionBundle(activities=["new"], movies=["new"], songs=["new"], food=["new"])
        stale = SuggestionBundle(activities=["old"], movies=["old"], songs=["old"], food=["old"])

        assert await store.put(alice.user_id, "200", newer, expected_fingerprint=None)
        # A slower request that read "no record" before the write above
        assert not await store.put(alice.user_id, "100", stale, expected_fingerprint=None)

        cached = await store.get(alice.user_id)
        assert cached.fingerprint == "200"
        assert cached.suggestions == newer

    @pytest.mark.asyncio
    async def test_put_accepted_when_expected_matches(self, store, alice):
        bundle = SuggestionBundle(activities=["a"], movies=["b"], songs=["c"], food=["d"])
        assert await store.put(alice.user_id, "1", bundle, expected_fingerprint=None)
        assert await store.put(alice.user_id, "2", bundle, expected_fingerprint="1")
        assert (await store.get(alice.user_id)).fingerprint == "2"

    @pytest.mark.asyncio
    async def test_stale_service_write_loses_race(self, store, alice):
        """Generation finishing after a newer record was stored leaves the newer one."""
        generator = FakeSuggestionGenerator()
        service = SuggestionService(store=store, generator=generator)
        old_entries = _entries(1)
        new_entries = _entries(2, 1)
        newer = SuggestionBundle(activities=["n"], movies=["n"], songs=["n"], food=["n"])

        async def racing_for_context(recent_entries):
            # Another request stores a record for the newer context meanwhile
            await store.put(
                alice.user_id, str(context_fingerprint(new_entries)), newer,
                expected_fingerprint=None,
            )
            return await FakeSuggestionGenerator.for_context(generator, recent_entries)

        generator.for_context = racing_for_context
        bundle = await service.get_suggestions(alice, old_entries)

        assert bundle == CONTEXT_BUNDLE
        cached = await store.get(alice.user_id)
        assert cached.fingerprint == str(context_fingerprint(new_entries))
        assert cached.suggestions == newer
