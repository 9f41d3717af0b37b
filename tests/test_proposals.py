"""Tests for proposal content translation."""

import json
from pathlib import Path

import pytest

from conftest import RecordingProvider, seed_translation
from content_translator.cache import CacheRecord
from content_translator.config import DEFAULT_LOCALE_MAP
from content_translator.extractor import ContentExtractor, EntityTranslation, UnsupportedLocaleError
from content_translator.hashing import hash_content
from content_translator.proposals import (
    InMemoryProposalSource,
    JsonProposalSource,
    Proposal,
    ProposalNotFoundError,
    ProposalTranslator,
)
from content_translator.providers import ProviderTranslation

BODY_HTML = '<p xmlns="http://www.w3.org/1999/xhtml">A proposal for a garden</p>'


def make_translator(store, provider, *proposals):
    return ProposalTranslator(InMemoryProposalSource(proposals), provider, store, DEFAULT_LOCALE_MAP)


@pytest.mark.asyncio
async def test_translates_title_and_body(provider, store):
    proposal = Proposal(id="p1", title="Community Garden Project", fragments={"summary": BODY_HTML})
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p1", "es")

    assert result == EntityTranslation(
        target_locale="es",
        source_locale="EN",
        translated={
            "title": "[ES] Community Garden Project",
            "summary": f"[ES] {BODY_HTML}",
        },
    )
    assert provider.calls == [(["Community Garden Project", BODY_HTML], "ES", "html")]


@pytest.mark.asyncio
async def test_cached_title_is_not_sent_again(provider, store):
    proposal = Proposal(id="p2", title="Community Garden Project", fragments={"summary": BODY_HTML})
    await seed_translation(
        store, "proposal:p2:title", "Community Garden Project", "[ES-CACHED] Community Garden Project", "ES"
    )
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p2", "es")

    assert result.translated == {
        "title": "[ES-CACHED] Community Garden Project",
        "summary": f"[ES] {BODY_HTML}",
    }
    assert provider.calls == [([BODY_HTML], "ES", "html")]


@pytest.mark.asyncio
async def test_fully_cached_proposal_skips_provider(provider, store):
    proposal = Proposal(id="p3", title="Fully Cached Proposal", fragments={"summary": BODY_HTML})
    await seed_translation(store, "proposal:p3:title", "Fully Cached Proposal", "[ES-CACHED] title", "ES")
    await seed_translation(store, "proposal:p3:summary", BODY_HTML, "[ES-CACHED] body", "ES")
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p3", "es")

    assert result.to_dict() == {
        "translated": {"title": "[ES-CACHED] title", "summary": "[ES-CACHED] body"},
        "sourceLocale": "EN",
        "targetLocale": "es",
    }
    assert provider.calls == []


@pytest.mark.asyncio
async def test_legacy_description_becomes_default_fragment(provider, store):
    proposal = Proposal(id="p4", title="Legacy Proposal", description="<p>Old-style HTML content</p>")
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p4", "es")

    assert result.translated == {
        "title": "[ES] Legacy Proposal",
        "default": "[ES] <p>Old-style HTML content</p>",
    }


@pytest.mark.asyncio
async def test_category_and_fragments_keep_field_order(provider, store):
    proposal = Proposal(
        id="p5",
        title="Title",
        category="Environment",
        fragments={"budget": "<p>$500</p>", "impact": "<p>Trees</p>"},
    )
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p5", "fr")

    assert list(result.translated) == ["title", "category", "budget", "impact"]
    assert provider.calls[0][0] == ["Title", "Environment", "<p>$500</p>", "<p>Trees</p>"]


@pytest.mark.asyncio
async def test_empty_fields_are_skipped(provider, store):
    proposal = Proposal(id="p6", title="Only title", category="", fragments={"summary": "   "})
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p6", "de")

    assert result.translated == {"title": "[DE] Only title"}


@pytest.mark.asyncio
async def test_proposal_without_content_short_circuits(provider, counting_store):
    translator = make_translator(counting_store, provider, Proposal(id="p7"))

    result = await translator.translate_proposal("p7", "pt")

    assert result == EntityTranslation(target_locale="pt", source_locale="", translated={})
    assert provider.calls == []
    assert counting_store.lookup_calls == []


@pytest.mark.asyncio
async def test_platform_locale_is_mapped_for_provider(provider, counting_store):
    translator = make_translator(counting_store, provider, Proposal(id="p8", title="Hello"))

    result = await translator.translate_proposal("p8", "pt")

    assert provider.calls[0][1] == "PT-BR"
    assert counting_store.lookup_calls[0][1] == "PT-BR"
    assert result.target_locale == "pt"


@pytest.mark.asyncio
async def test_unsupported_locale_rejected_before_work(provider, counting_store):
    translator = make_translator(counting_store, provider, Proposal(id="p9", title="Hello"))

    with pytest.raises(UnsupportedLocaleError, match="xx"):
        await translator.translate_proposal("p9", "xx")

    assert provider.calls == []
    assert counting_store.lookup_calls == []


@pytest.mark.asyncio
async def test_missing_proposal_raises(provider, store):
    translator = make_translator(store, provider)

    with pytest.raises(ProposalNotFoundError, match="nope"):
        await translator.translate_proposal("nope", "es")


@pytest.mark.asyncio
async def test_source_locale_comes_from_first_result(store):
    provider = RecordingProvider(detected="fr")
    await seed_translation(store, "proposal:p10:title", "Titel", "Title", "EN-US", source_locale="DE")
    translator = make_translator(store, provider, Proposal(id="p10", title="Titel", category="Santé"))

    result = await translator.translate_proposal("p10", "en")

    assert result.source_locale == "DE"
    assert result.translated == {"title": "Title", "category": "[EN-US] Santé"}


class PerTextLocaleProvider(RecordingProvider):
    """Mock provider reporting a detected language per source text."""

    def __init__(self, detected_by_text):
        super().__init__()
        self.detected_by_text = detected_by_text

    async def translate(self, texts, target_locale, tag_handling="html"):
        results = await super().translate(texts, target_locale, tag_handling)
        return [
            ProviderTranslation(text=result.text, detected_source_lang=self.detected_by_text[text])
            for result, text in zip(results, texts)
        ]


@pytest.mark.asyncio
async def test_undetected_language_does_not_hide_later_source_locale(store):
    provider = PerTextLocaleProvider({"Garden": "", "<p>Trees</p>": "en"})
    proposal = Proposal(id="p11", title="Garden", fragments={"summary": "<p>Trees</p>"})
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p11", "es")

    assert result.source_locale == "EN"
    assert result.translated == {"title": "[ES] Garden", "summary": "[ES] <p>Trees</p>"}


@pytest.mark.asyncio
async def test_cached_row_without_source_locale_is_skipped(store):
    await store.upsert_many(
        [
            CacheRecord(
                content_key="proposal:p12:title",
                content_hash=hash_content("Garden"),
                target_locale="ES",
                translated_text="Jardín",
                source_locale=None,
            )
        ]
    )
    provider = RecordingProvider(detected="fr")
    translator = make_translator(store, provider, Proposal(id="p12", title="Garden", category="Parc"))

    result = await translator.translate_proposal("p12", "es")

    assert result.source_locale == "FR"


@pytest.mark.asyncio
async def test_fragment_names_cannot_replace_fixed_fields(provider, store):
    proposal = Proposal(
        id="p13",
        title="Real title",
        category="Real category",
        fragments={"title": "<p>Fake title</p>", "category": "<p>Fake</p>", "summary": "<p>Body</p>"},
    )
    translator = make_translator(store, provider, proposal)

    result = await translator.translate_proposal("p13", "es")

    assert result.translated == {
        "title": "[ES] Real title",
        "category": "[ES] Real category",
        "summary": "[ES] <p>Body</p>",
    }


def test_build_entries_namespaces_content_keys(provider, store):
    class OrganizationExtractor(ContentExtractor):
        entity_type = "organization"

    extractor = OrganizationExtractor(provider, store, DEFAULT_LOCALE_MAP)
    entries = extractor.build_entries("org-1", {"name": "Acme", "mission": None, "bio": "<p>Hi</p>"})

    assert [entry.content_key for entry in entries] == ["organization:org-1:name", "organization:org-1:bio"]


@pytest.mark.asyncio
async def test_json_proposal_source(tmp_path: Path):
    path = tmp_path / "proposals.json"
    path.write_text(
        json.dumps(
            [
                {"id": "a", "title": "First", "fragments": {"summary": "<p>One</p>"}},
                {"id": 42, "title": "Second", "description": "<p>Two</p>"},
            ]
        ),
        encoding="utf-8",
    )
    source = JsonProposalSource(str(path))

    first = await source.get_proposal("a")
    second = await source.get_proposal("42")

    assert first.fragments == {"summary": "<p>One</p>"}
    assert second.translatable_fields() == {"title": "Second", "category": None, "default": "<p>Two</p>"}
