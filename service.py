# service.py
"""
Operations behind the HTTP routes. Nothing here knows about FastAPI, so the
same calls can be driven from tests or another transport.
"""
import logging
from typing import Any, Dict, List, Mapping, Tuple, Union

import pydantic

from csv_io import export_results_csv, parse_leads_csv
from exceptions import MissingLeadsError, MissingOfferError, NotFoundError, OfferValidationError
from models import Intent, Offer, ScoredLead, StoredLead, StoredOffer
from scoring import ScoringPipeline
from storage import LeadStore

logger = logging.getLogger(__name__)


def create_offer(store: LeadStore, offer: Union[Offer, Mapping[str, Any]]) -> StoredOffer:
    if not isinstance(offer, Offer):
        try:
            offer = Offer.model_validate(offer)
        except pydantic.ValidationError as e:
            details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            raise OfferValidationError("Validation failed", details=details)
    saved = store.save_offer(offer)
    logger.info(f"Offer saved: {saved.name}")
    return saved


def get_offer(store: LeadStore) -> StoredOffer:
    offer = store.get_offer()
    if offer is None:
        raise NotFoundError("No offer found. Create one with POST /offer first.")
    return offer


def upload_leads(store: LeadStore, content: bytes) -> List[StoredLead]:
    leads = parse_leads_csv(content)
    saved = store.save_leads(leads)
    logger.info(f"Imported {len(saved)} leads")
    return saved


def get_leads(store: LeadStore) -> List[StoredLead]:
    leads = store.get_leads()
    if not leads:
        raise NotFoundError("No leads found. Upload them with POST /leads/upload first.")
    return leads


def summarize(results: List[ScoredLead]) -> Dict[str, int]:
    return {
        intent.value.lower(): sum(1 for r in results if r.intent == intent)
        for intent in (Intent.HIGH, Intent.MEDIUM, Intent.LOW)
    }


def check_scoring_inputs(store: LeadStore) -> Tuple[StoredOffer, List[StoredLead]]:
    """Both an offer and a non-empty lead batch must exist before any AI call."""
    offer = store.get_offer()
    if offer is None:
        raise MissingOfferError()
    leads = store.get_leads()
    if not leads:
        raise MissingLeadsError()
    return offer, leads


async def score_leads(store: LeadStore, pipeline: ScoringPipeline) -> Dict[str, Any]:
    offer, leads = check_scoring_inputs(store)

    results = await pipeline.score_leads(leads, offer)
    store.save_results(results)
    return {
        "count": len(results),
        "summary": summarize(results),
        "leads": results,
    }


def get_results(store: LeadStore, include_debug: bool = False) -> List[Dict[str, Any]]:
    results = store.get_results()
    if not results:
        raise NotFoundError("No results found. Run scoring with POST /score first.")
    return [r.to_view(include_debug=include_debug) for r in results]


def export_results(store: LeadStore) -> str:
    results = store.get_results()
    if not results:
        raise NotFoundError("No results found. Run scoring with POST /score first.")
    return export_results_csv(results)
