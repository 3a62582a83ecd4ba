# csv_io.py
import io
from typing import List, Sequence

import pandas as pd

from exceptions import LeadParseError
from models import Lead, ScoredLead

REQUIRED_COLUMNS = ["name", "role", "company", "industry", "location", "linkedin_bio"]

EXPORT_COLUMNS = [
    ("Name", "name"),
    ("Role", "role"),
    ("Company", "company"),
    ("Industry", "industry"),
    ("Location", "location"),
    ("Intent", "intent"),
    ("Score", "score"),
    ("Reasoning", "reasoning"),
]


def parse_leads_csv(content: bytes) -> List[Lead]:
    """Parse an uploaded CSV into leads. Column names are matched case-insensitively."""
    try:
        df = pd.read_csv(
            io.BytesIO(content), dtype=str, keep_default_na=False,
            skipinitialspace=True, encoding="utf-8-sig",
            index_col=False,
        )
    except pd.errors.EmptyDataError:
        raise LeadParseError("CSV file is empty or invalid")
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise LeadParseError(f"CSV file is empty or invalid: {e}")

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise LeadParseError(
            f"CSV must contain columns: {', '.join(REQUIRED_COLUMNS)}",
            details=[f"missing column: {c}" for c in missing],
        )
    if df.empty:
        raise LeadParseError("CSV file is empty or invalid")

    leads = []
    for _, row in df[REQUIRED_COLUMNS].iterrows():
        leads.append(Lead(**{c: str(row[c]).strip() for c in REQUIRED_COLUMNS}))
    return leads


def export_results_csv(results: Sequence[ScoredLead]) -> str:
    """Render scored leads with a fixed column order; fields are quoted only when needed."""
    rows = []
    for lead in results:
        data = lead.model_dump(mode="json")
        rows.append({header: data.get(attr) for header, attr in EXPORT_COLUMNS})
    df = pd.DataFrame(rows, columns=[header for header, _ in EXPORT_COLUMNS])
    stream = io.StringIO()
    df.to_csv(stream, index=False, na_rep="", lineterminator="\n")
    return stream.getvalue()
