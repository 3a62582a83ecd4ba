"""Tests for the store and the transport-agnostic operations."""

import pytest

import service
from exceptions import MissingLeadsError, MissingOfferError, NotFoundError, OfferValidationError
from models import Intent

LEADS_CSV = (
    b"name,role,company,industry,location,linkedin_bio\n"
    b"Ava Patel,Head of Growth,FlowMetrics,B2B SaaS,Pune,Growth leader\n"
    b"Bob Stone,Intern,Acme Steel,Manufacturing,,\n"
)


class TestInMemoryStore:
    def test_offer_is_stamped(self, store, offer):
        saved = store.save_offer(offer)
        assert saved.name == offer.name
        assert saved.created_at is not None
        assert store.get_offer() == saved

    def test_leads_get_sequential_ids(self, store, ava, bob):
        saved = store.save_leads([ava, bob])
        assert [lead.id for lead in saved] == [1, 2]
        assert saved[0].uploaded_at == saved[1].uploaded_at

    def test_last_write_wins(self, store, ava, bob, cara):
        store.save_leads([ava, bob])
        store.save_leads([cara])
        leads = store.get_leads()
        assert [lead.name for lead in leads] == [cara.name]
        assert leads[0].id == 1

    def test_new_upload_drops_old_results(self, store, ava):
        store.save_results(["stale"])
        store.save_leads([ava])
        assert store.get_results() == []

    def test_clear_leads_keeps_offer(self, store, offer, ava):
        store.save_offer(offer)
        store.save_leads([ava])
        store.save_results(["old"])
        store.clear_leads()
        assert store.get_leads() == []
        assert store.get_results() == []
        assert store.get_offer() is not None

    def test_clear_all(self, store, offer, ava):
        store.save_offer(offer)
        store.save_leads([ava])
        store.clear_all()
        assert store.get_offer() is None
        assert store.get_leads() == []


class TestOfferOperations:
    def test_create_from_mapping_trims(self, store):
        saved = service.create_offer(store, {
            "name": "  AI Outreach ",
            "value_props": [" fast "],
            "ideal_use_cases": ["B2B SaaS"],
        })
        assert saved.name == "AI Outreach"
        assert saved.value_props == ["fast"]

    @pytest.mark.parametrize("payload", [
        {"name": "", "value_props": ["a"], "ideal_use_cases": ["b"]},
        {"name": "x", "value_props": [], "ideal_use_cases": ["b"]},
        {"name": "x", "value_props": ["a"], "ideal_use_cases": []},
        {"name": "x", "value_props": ["a"]},
    ])
    def test_invalid_offer(self, store, payload):
        with pytest.raises(OfferValidationError) as exc:
            service.create_offer(store, payload)
        assert exc.value.details
        assert store.get_offer() is None

    def test_get_offer_not_found(self, store):
        with pytest.raises(NotFoundError):
            service.get_offer(store)


class TestScoreOperation:
    @pytest.mark.asyncio
    async def test_missing_offer(self, store, make_pipeline, fake_provider):
        service.upload_leads(store, LEADS_CSV)
        with pytest.raises(MissingOfferError):
            await service.score_leads(store, make_pipeline(fake_provider))
        assert fake_provider.prompts == []

    @pytest.mark.asyncio
    async def test_missing_leads(self, store, offer, make_pipeline, fake_provider):
        service.create_offer(store, offer)
        with pytest.raises(MissingLeadsError):
            await service.score_leads(store, make_pipeline(fake_provider))
        assert fake_provider.prompts == []

    @pytest.mark.asyncio
    async def test_scores_and_stores(self, store, offer, make_pipeline, fake_provider):
        service.create_offer(store, offer)
        service.upload_leads(store, LEADS_CSV)

        outcome = await service.score_leads(store, make_pipeline(fake_provider))

        assert outcome["count"] == 2
        assert outcome["summary"] == {"high": 1, "medium": 0, "low": 1}
        assert [r.intent for r in store.get_results()] == [Intent.HIGH, Intent.LOW]

        views = service.get_results(store)
        assert "debug" not in views[0]
        debug_views = service.get_results(store, include_debug=True)
        assert debug_views[0]["debug"]["rule_score"] == 50

        csv_text = service.export_results(store)
        assert csv_text.startswith("Name,Role,Company,Industry,Location,Intent,Score,Reasoning\n")

    def test_results_not_found(self, store):
        with pytest.raises(NotFoundError):
            service.get_results(store)
        with pytest.raises(NotFoundError):
            service.export_results(store)
