"""
Flatten scoring-engine results and widget request metadata into submission fields.

The widget forwards the scoring response in several wrappings
(``payload`` / ``result`` / ``received``), with sub-scores under
``elsa_results`` or ``elsa``.
"""

import math
from typing import Any, Dict, Optional


def _num(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(n):
        return None
    return int(n) if n.is_integer() else n


def normalize_mss_payload(raw: Any) -> Dict[str, Any]:
    """Normalize a scoring result to a flat dict of scores and transcript."""
    if not isinstance(raw, dict) or not raw:
        return {
            "score": None,
            "cefr": None,
            "toefl": None,
            "ielts": None,
            "pte": None,
            "fluency": None,
            "grammar": None,
            "pronunciation": None,
            "vocabulary": None,
            "transcript": "",
        }

    outer = raw.get("payload") or raw.get("result") or raw.get("received") or raw
    if not isinstance(outer, dict):
        outer = raw
    r = outer.get("received") or outer
    if not isinstance(r, dict):
        r = outer
    elsa = r.get("elsa_results") or r.get("elsa") or {}
    if not isinstance(elsa, dict):
        elsa = {}

    cefr = elsa.get("cefr_level") or r.get("cefr_level") or r.get("cefr") or ""
    cefr = str(cefr).upper().strip() or None

    return {
        "score": _num(r.get("score")),
        "cefr": cefr,
        "toefl": _num(elsa.get("toefl_score")),
        "ielts": _num(elsa.get("ielts_score")),
        "pte": _num(elsa.get("pte_score")),
        "fluency": _num(elsa.get("fluency")),
        "grammar": _num(elsa.get("grammar")),
        "pronunciation": _num(elsa.get("pronunciation")),
        "vocabulary": _num(elsa.get("vocabulary")),
        "transcript": r.get("transcript") or r.get("rawTranscript") or outer.get("transcript") or "",
    }


# Score fields filled from ``mssBody`` when the flat body leaves them empty
_SCORE_FIELDS = (
    "score",
    "toefl",
    "ielts",
    "pte",
    "cefr",
    "fluency",
    "grammar",
    "pronunciation",
    "vocabulary",
    "transcript",
)

# Older widget builds send these names
_ALIASES = {"seconds": "lengthSec", "submissionMs": "submitTime"}


def mask_key(key: Any) -> str:
    """Mask a credential for logging: first and last four characters only."""
    if not key:
        return ""
    s = str(key)
    if len(s) <= 8:
        return "****"
    return f"{s[:4]}…{s[-4:]}"


def _empty(value: Any) -> bool:
    return value is None or value == ""


def submission_fields_from_payload(body: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a widget submission body into log fields.

    Fields already present and non-empty in ``body`` win over values taken
    from its ``mssBody``. Raw ``apiKey``/``apiSecret`` values are never
    returned; only their masks are. ``rating`` is derived from ``score``.
    """
    fields = {k: v for k, v in body.items() if k not in ("mssBody", "apiKey", "apiSecret")}

    for alias, name in _ALIASES.items():
        if _empty(fields.get(name)) and not _empty(fields.get(alias)):
            fields[name] = fields[alias]
        fields.pop(alias, None)

    if _empty(fields.get("apiKeyMask")) and body.get("apiKey"):
        fields["apiKeyMask"] = mask_key(body["apiKey"])
    if _empty(fields.get("apiSecretMask")) and body.get("apiSecret"):
        fields["apiSecretMask"] = mask_key(body["apiSecret"])

    mss_body = body.get("mssBody")
    if isinstance(mss_body, dict):
        normalized = normalize_mss_payload(mss_body)
        for name in _SCORE_FIELDS:
            if _empty(fields.get(name)) and not _empty(normalized[name]):
                fields[name] = normalized[name]

    if _empty(fields.get("rating")) and _num(fields.get("score")) is not None:
        fields["rating"] = rating_label(fields["score"])
    return fields


def rating_label(score) -> str:
    """Human label for an overall score."""
    n = _num(score)
    if n is None:
        return "–"
    if n >= 90:
        return "Excellent"
    if n >= 80:
        return "Strong"
    if n >= 70:
        return "Good"
    if n >= 60:
        return "Fair"
    return "Needs work"
