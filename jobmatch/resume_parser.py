"""Extract a structured, privacy-masked candidate profile from résumé text.

Every field comes from a list of extractor rules: pure functions
``text -> value | None`` tried in order, first non-None result wins. The
matching is keyword/regex only and is best-effort by nature (names in
particular).
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar

from jobmatch.errors import InvalidInputError
from jobmatch.log import get_logger
from jobmatch.models import (
    CandidateProfile,
    Education,
    Experience,
    PersonalInfo,
    Role,
    Skills,
)
from jobmatch.text_extractor import FileLike, extract_text
from jobmatch.vocabulary import (
    CERTIFICATIONS,
    CITIES,
    DEGREES,
    ROLES,
    TECHNICAL_SKILLS,
)

log = get_logger(__name__)

T = TypeVar("T")
Rule = Callable[[str], Optional[T]]


def first_match(rules: Iterable[Rule], text: str) -> T | None:
    """Evaluate *rules* in order and return the first non-None result."""
    for rule in rules:
        value = rule(text)
        if value is not None:
            return value
    return None


def regex_rule(pattern: str, group: int = 0, convert: Callable[[str], T] = str) -> Rule:
    rx = re.compile(pattern, re.IGNORECASE)

    def rule(text: str) -> T | None:
        m = rx.search(text)
        return convert(m.group(group)) if m else None

    rule.__name__ = f"regex_rule({pattern!r})"
    return rule


def keyword_rule(keywords: tuple[str, ...], value: T) -> Rule:
    def rule(text: str) -> T | None:
        low = text.lower()
        return value if any(k in low for k in keywords) else None

    rule.__name__ = f"keyword_rule({'/'.join(keywords)})"
    return rule


def constant_rule(value: T) -> Rule:
    return lambda _text: value


# ── Contact details ──────────────────────────────────────────────────────

_EMAIL_RE = r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"
# Optional +CC, then at least 10 digits with short runs of separators between them.
_PHONE_RE = r"(?:\+\d{1,3}[\s.-]?)?\(?\d(?:[\s().-]{0,2}\d){9,11}"
_NAME_RE = re.compile(r"^[A-Z][a-z]+(?:\s[A-Z][a-z]+){1,3}$")

EMAIL_RULES: tuple[Rule, ...] = (regex_rule(_EMAIL_RE),)
PHONE_RULES: tuple[Rule, ...] = (regex_rule(_PHONE_RE, convert=str.strip),)


def extract_email(text: str) -> str | None:
    return first_match(EMAIL_RULES, text)


def extract_phone(text: str) -> str | None:
    return first_match(PHONE_RULES, text)


def extract_name(text: str) -> str | None:
    """Best-effort: first of the first three non-empty lines that looks like a name."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines[:3]:
        if len(line) >= 50 or "@" in line or "http" in line:
            continue
        if _NAME_RE.match(line):
            return line
    return None


def extract_location(text: str) -> str | None:
    return CITIES.first_occurrence(text)


# ── Skills, experience, education ────────────────────────────────────────


def extract_skills(text: str) -> Skills:
    technical = [s.lower() for s in TECHNICAL_SKILLS.find_in(text)]
    return Skills(
        technical=tuple(dict.fromkeys(technical)),
        certifications=tuple(CERTIFICATIONS.find_in(text)),
    )


YEARS_RULES: tuple[Rule, ...] = (
    regex_rule(r"(\d+)\s*[-+]?\s*years?\s*of\s*experience", 1, int),
    regex_rule(r"(\d+)\s*years?\s*experience", 1, int),
    regex_rule(r"(\d+)\s*yrs?\s*exp", 1, int),
    regex_rule(r"experience.*?(\d+)\s*years?", 1, int),
    keyword_rule(("senior", "lead"), 5),
    keyword_rule(("junior", "fresher"), 1),
    keyword_rule(("intern",), 0),
    constant_rule(2),
)


def extract_total_years(text: str) -> int:
    return first_match(YEARS_RULES, text)  # constant_rule guarantees a value


def extract_roles(text: str) -> tuple[Role, ...]:
    return tuple(Role(title=t) for t in ROLES.find_in(text))


def extract_education(text: str) -> tuple[Education, ...]:
    return tuple(Education(degree=d) for d in DEGREES.find_in(text))


# ── Masking ──────────────────────────────────────────────────────────────


def mask_email(email: str | None) -> str | None:
    """``john.doe@example.com`` -> ``joh***@example.com``."""
    if email is None:
        return None
    local, _, domain = email.partition("@")
    if not local or not domain:
        return email
    visible = min(3, len(local))
    return f"{local[:visible]}***@{domain}"


def mask_phone(phone: str | None) -> str | None:
    """``+91-9876543210`` -> ``+91-****-***-3210``; short numbers pass through."""
    if phone is None:
        return None
    digits = re.sub(r"\D", "", phone)
    if len(digits) < 10:
        return phone
    prefix = "+91" if phone.startswith("+91") else ""
    return f"{prefix}-****-***-{digits[-4:]}"


# ── Public API ───────────────────────────────────────────────────────────


def extract_personal_info(text: str) -> PersonalInfo:
    email = extract_email(text)
    phone = extract_phone(text)
    return PersonalInfo(
        name=extract_name(text),
        email_masked=mask_email(email),
        email_raw=email,
        phone_masked=mask_phone(phone),
        phone_raw=phone,
        location=extract_location(text),
    )


def parse(raw_text: str) -> CandidateProfile:
    """Build a CandidateProfile from raw résumé text."""
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise InvalidInputError("Invalid resume text: expected a non-empty string")

    profile = CandidateProfile(
        personal_info=extract_personal_info(raw_text),
        skills=extract_skills(raw_text),
        experience=Experience(
            total_years=extract_total_years(raw_text),
            roles=extract_roles(raw_text),
        ),
        education=extract_education(raw_text),
        raw_text=raw_text,
    )
    log.debug(
        "Parsed resume — skills=%d, years=%d, degrees=%d",
        len(profile.skills.technical),
        profile.experience.total_years,
        len(profile.education),
    )
    return profile


def parse_resume_file(source: FileLike) -> CandidateProfile:
    """Extract text from a résumé file and parse it."""
    label = Path(source).name if isinstance(source, (str, Path)) else getattr(source, "name", "upload")
    log.info("Extracting text from %s", label)
    text = extract_text(source)
    if not text.strip():
        raise InvalidInputError(f"Could not extract any text from {label}")
    profile = parse(text)
    log.info(
        "Resume parsed — skills=%d, years=%d",
        len(profile.skills.technical),
        profile.experience.total_years,
    )
    return profile
