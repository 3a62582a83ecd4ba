# models.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Intent(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RoleMatch(str, Enum):
    DECISION_MAKER = "Decision Maker"
    INFLUENCER = "Influencer"
    OTHER = "Other"
    UNKNOWN = "Unknown"


class IndustryMatch(str, Enum):
    EXACT = "Exact ICP match"
    ADJACENT = "Adjacent industry"
    DIFFERENT = "Different industry"
    NO_DATA = "No data"


class Offer(BaseModel):
    name: str
    value_props: List[str]
    ideal_use_cases: List[str]

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required and must be a non-empty string")
        return v

    @field_validator("value_props", "ideal_use_cases")
    @classmethod
    def non_empty_strings(cls, v: List[str], info) -> List[str]:
        items = [item.strip() for item in v]
        if not items or not all(items):
            raise ValueError(f"{info.field_name} is required and must be a non-empty list of non-empty strings")
        return items


class StoredOffer(Offer):
    created_at: datetime


class Lead(BaseModel):
    name: str = ""
    role: str = ""
    company: str = ""
    industry: str = ""
    location: str = ""
    linkedin_bio: str = ""


class StoredLead(Lead):
    id: int
    uploaded_at: datetime


class RuleBreakdown(BaseModel):
    role: int = Field(ge=0, le=20)
    industry: int = Field(ge=0, le=20)
    completeness: int = Field(ge=0, le=10)


class RuleDetails(BaseModel):
    role_match: RoleMatch
    industry_match: IndustryMatch
    data_complete: bool


class RuleScoreResult(BaseModel):
    total: int = Field(ge=0, le=50)
    breakdown: RuleBreakdown
    details: RuleDetails


class AIClassification(BaseModel):
    intent: Intent
    score: int
    reasoning: str = ""
    raw: str = ""


class ScoringDebug(BaseModel):
    rule_score: int
    ai_score: int
    rule_breakdown: RuleBreakdown
    rule_details: RuleDetails
    ai_intent: Intent
    ai_reasoning: str
    ai_raw: str = ""


class ScoredLead(Lead):
    intent: Intent
    score: int = Field(ge=0, le=100)
    reasoning: str
    error: Optional[str] = None
    debug: Optional[ScoringDebug] = None

    def to_view(self, include_debug: bool = False) -> dict:
        """Plain dict for API responses; debug is dropped unless asked for."""
        exclude = None if include_debug else {"debug"}
        return self.model_dump(mode="json", exclude=exclude, exclude_none=True)
