# storage.py
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Sequence

from models import Lead, Offer, ScoredLead, StoredLead, StoredOffer


class LeadStore(Protocol):
    def save_offer(self, offer: Offer) -> StoredOffer: ...
    def get_offer(self) -> Optional[StoredOffer]: ...
    def save_leads(self, leads: Sequence[Lead]) -> List[StoredLead]: ...
    def get_leads(self) -> List[StoredLead]: ...
    def save_results(self, results: Sequence[ScoredLead]) -> List[ScoredLead]: ...
    def get_results(self) -> List[ScoredLead]: ...
    def clear_leads(self) -> None: ...
    def clear_all(self) -> None: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore:
    """Keeps one current offer, lead batch and result batch; each write replaces the last."""

    def __init__(self):
        self.clear_all()

    def save_offer(self, offer: Offer) -> StoredOffer:
        self._offer = StoredOffer(**offer.model_dump(include=set(Offer.model_fields)), created_at=_now())
        return self._offer

    def get_offer(self) -> Optional[StoredOffer]:
        return self._offer

    def save_leads(self, leads: Sequence[Lead]) -> List[StoredLead]:
        uploaded_at = _now()
        self._leads = [
            StoredLead(id=i + 1, uploaded_at=uploaded_at, **lead.model_dump(include=set(Lead.model_fields)))
            for i, lead in enumerate(leads)
        ]
        # results belong to the previous batch
        self._results = []
        return list(self._leads)

    def get_leads(self) -> List[StoredLead]:
        return list(self._leads)

    def save_results(self, results: Sequence[ScoredLead]) -> List[ScoredLead]:
        self._results = list(results)
        return list(self._results)

    def get_results(self) -> List[ScoredLead]:
        return list(self._results)

    def clear_leads(self) -> None:
        self._leads = []
        self._results = []

    def clear_all(self) -> None:
        self._offer: Optional[StoredOffer] = None
        self._leads: List[StoredLead] = []
        self._results: List[ScoredLead] = []
