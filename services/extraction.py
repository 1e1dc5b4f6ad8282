from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Tuple

from models import ProfileRecord


logger = logging.getLogger(__name__)

SWEDISH_INDICATORS = [
    "på", "och", "är", "för", "hos", "med", "som", "att", "den", "ett",
    "sverige", "stockholm", "göteborg", "malmö", "uppsala",
    "ansvarig", "chef", "utvecklare", "säljare", "konsult",
    "jag", "vi", "de", "han", "hon", "det", "detta", "dessa",
]

ENGLISH_INDICATORS = [
    "at", "and", "is", "for", "with", "as", "to", "the", "a", "an",
    "sweden", "london", "uk", "usa", "united states", "europe",
    "responsible", "manager", "developer", "sales", "consultant",
    "i", "we", "they", "he", "she", "it", "this", "these",
]

PREPOSITIONS = {
    "sv": ["på", "hos", "i", "vid", "med", "@", "för"],
    "en": ["at", "with", "for", "@", "in"],
}

COMMON_TITLES = {
    "sv": [
        "vd", "ceo", "verkställande direktör", "chef", "direktör", "manager", "ledare",
        "ansvarig", "specialist", "konsult", "utvecklare", "ingenjör", "säljare",
        "projektledare", "koordinator", "analytiker", "strateg", "handläggare",
        "head of", "lead", "senior", "junior",
    ],
    "en": [
        "ceo", "cto", "cfo", "coo", "chief", "director", "head", "vp", "vice president",
        "manager", "lead", "senior", "principal", "staff", "executive", "specialist",
        "engineer", "developer", "consultant", "analyst", "strategist", "coordinator",
        "sales", "account", "product", "project", "program", "advisor",
    ],
}

UNKNOWN = {"sv": "okänt", "en": "unknown"}


def _count_words(text: str, words: List[str]) -> int:
    return sum(len(re.findall(rf"\b{re.escape(w)}\b", text)) for w in words)


def detect_language(text: str) -> str:
    """Return 'sv' when Swedish indicator words outnumber English ones, else 'en'."""
    if not text:
        return "en"
    lowered = text.lower()
    swedish = _count_words(lowered, SWEDISH_INDICATORS)
    english = _count_words(lowered, ENGLISH_INDICATORS)
    logger.debug(f"Language detection: sv={swedish} en={english}")
    return "sv" if swedish > english else "en"


def _prep_alternation(language: str) -> str:
    return "|".join(re.escape(p) for p in PREPOSITIONS[language])


def _clean_company(company: str) -> str:
    company = re.sub(r"\s+\|.*$", "", company)
    company = re.sub(r"\s+•.*$", "", company)
    company = re.sub(r"\s*\(.*\)", "", company)
    company = re.sub(r",.*$", "", company)
    return company.strip()


def _clean_title(title: str, company: str, language: str) -> str:
    if company and company in title:
        title = title.replace(company, "").strip()
    for prep in PREPOSITIONS[language]:
        suffix = f" {prep}"
        if title.lower().endswith(suffix):
            title = title[: title.lower().rfind(suffix)].strip()
    return title


def extract_title_company(snippet: str, language: str = "en") -> Tuple[str, str]:
    """Pull a (title, company) pair out of a search snippet.

    Patterns, first hit wins: "Title <prep> Company", "Title - Company" or
    "Title · Company", a preposition inside the first sentence, then a known
    title keyword followed by a preposition.
    """
    unknown = UNKNOWN.get(language, UNKNOWN["en"])
    if language not in PREPOSITIONS:
        language = "en"
    if not snippet:
        return unknown, unknown

    preps = _prep_alternation(language)
    title = company = ""

    m = re.match(rf"^([^\n.;:]+?)\s+(?:{preps})\s+([^\n.;:]+)", snippet, re.IGNORECASE)
    if m:
        title, company = m.group(1).strip(), m.group(2).strip()

    if not title or not company:
        m = re.match(r"^([^-·\n.;:]+)\s*[-·]\s*([^-·\n.;:]+)", snippet)
        if m:
            title, company = m.group(1).strip(), m.group(2).strip()

    if not title or not company:
        sentences = [s for s in re.split(r"[.!?]", snippet) if s]
        first = sentences[0] if sentences else ""
        for prep in PREPOSITIONS[language]:
            m = re.search(rf"([^\n.;:]+?)\s+{re.escape(prep)}\s+([^\n.;:]+)", first, re.IGNORECASE)
            if m:
                title, company = m.group(1).strip(), m.group(2).strip()
                break

    if not title:
        for keyword in COMMON_TITLES[language]:
            m = re.search(
                rf"\b(\w*\s*{re.escape(keyword)}\s+[^\n.;:]{{0,30}})\s+(?:{preps})\s+([^\n.;:]+)",
                snippet,
                re.IGNORECASE,
            )
            if m:
                title, company = m.group(1).strip(), m.group(2).strip()
                break

    if company:
        company = _clean_company(company)
    if title:
        title = _clean_title(title, company, language)

    return title or unknown, company or unknown


def extract_name(title: str) -> str:
    """Name is whatever precedes the first dash or pipe in a result title."""
    if not title:
        return ""
    return re.split(r"[-–|]", title, maxsplit=1)[0].strip()


def profile_from_search_result(item: Dict[str, Any]) -> ProfileRecord:
    """Build a ProfileRecord from a Google Custom Search item (title/snippet/link)."""
    title_text = item.get("title") or ""
    snippet = item.get("snippet") or ""
    language = detect_language(f"{title_text} {snippet}")
    job_title, company = extract_title_company(snippet, language)
    return ProfileRecord(
        name=extract_name(title_text) or UNKNOWN[language],
        title=job_title,
        company=company,
        url=item.get("link") or None,
        location=UNKNOWN[language],
        confidence=item.get("confidence"),
    )
