import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .models import ProfessionalRecord

logger = logging.getLogger(__name__)

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_BLOCK = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)
_UNSAFE_ATTRIBUTES = re.compile(r"javascript:|onerror=|onclick=", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def load_json(filepath: str) -> Any:
    with open(filepath, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json(filepath: str, records: List[ProfessionalRecord]) -> None:
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump([r.model_dump(mode="json") for r in records], f, indent=2, ensure_ascii=False)


class RecordProcessor:
    """Turns raw ``majstori`` rows into validated records, defaulting missing fields once."""

    def process_row(self, row: Any) -> Optional[ProfessionalRecord]:
        if not isinstance(row, dict):
            logger.warning("Skipping majstor row that is not an object: %r", row)
            return None

        identifier = row.get("id")
        if identifier is None or not str(identifier).strip():
            logger.warning("Skipping majstor row without id (name=%r)", row.get("name"))
            return None

        try:
            return ProfessionalRecord.model_validate(row)
        except ValidationError as e:
            # Field values are defaulted by the model, so only an unusable id ends up here.
            logger.warning("Skipping majstor row with unusable id %r: %s", identifier, e)
            return None

    def process_all_rows(self, rows: Iterable[Any]) -> List[ProfessionalRecord]:
        records = []
        for row in rows or []:
            record = self.process_row(row)
            if record is not None:
                records.append(record)
        return records


def sanitize_html(html: Optional[str]) -> str:
    """Drop script/iframe blocks and inline handlers from a bio before rendering it."""
    if not html:
        return ""
    cleaned = _SCRIPT_BLOCK.sub("", html)
    cleaned = _IFRAME_BLOCK.sub("", cleaned)
    cleaned = _UNSAFE_ATTRIBUTES.sub("", cleaned)
    return cleaned.strip()


def strip_html(html: Optional[str], limit: Optional[int] = 160) -> str:
    if not html:
        return ""
    text = _TAG.sub(" ", html)
    text = text.replace("&nbsp;", " ")
    text = _WHITESPACE.sub(" ", text).strip()
    return text[:limit] if limit is not None else text


def profile_summary(record: ProfessionalRecord) -> Dict[str, Any]:
    """Flat dict written to query reports."""
    summary = {
        "id": record.id,
        "name": record.name,
        "location": record.location,
        "service_area": record.service_area,
        "categories": record.categories,
        "languages": record.languages,
        "contacts": record.contacts,
        "wait_time_days": record.wait_time_days,
        "emergency_available": record.emergency_available,
        "weekend_evening": record.weekend_evening,
        "bio": strip_html(record.bio),
    }
    if record.search_score is not None:
        summary["score"] = record.search_score
    return summary
