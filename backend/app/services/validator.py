"""
Portfolio Backend — Request Validator
=======================================

What:  Declarative per-field rules for project payloads, checked all at once.
How:   Each FieldRule names a field (API name + model attribute), its kind and
       its bounds. `Validator.validate_create` / `validate_update` walk every
       rule, collect every violation, and build the typed request schema only
       when none were found.
Who:   Called by ProjectService before anything touches persistence.

Rule kinds:
    TEXT     string, trimmed, length-bounded; stored trimmed
    URL      optional URL; None / "" means "not set"; stored as sent (trimmed)
    TECH     normalized list of strings (never a violation)
    FLAG     loose boolean (never a violation)
    INTEGER  32-bit integer; a bad value is a violation on create, ignored on update

URL well-formedness:
    The scheme is optional ("github.com/me" is fine) and, when present, must
    be http, https or ftp. The host must be an IP address or a dotted name
    ending in an alphabetic TLD. At most MAX_URL_LENGTH characters.

Partial updates:
    On update a field is applied only when it is present AND of the expected
    type. Text and URL fields of the wrong type are reported as violations
    (same bounds as create). `order` values that do not coerce to a 32-bit
    integer and `tech` values that are neither a list nor a non-blank string
    are skipped without an error, leaving the stored value unchanged.
"""

import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
from uuid import UUID

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import violation
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.services.normalizer import normalize_tech, to_boolean, to_int

logger = logging.getLogger(__name__)

TEXT = "text"
URL = "url"
TECH = "tech"
FLAG = "flag"
INTEGER = "integer"

_MISSING = object()
_url_adapter = TypeAdapter(AnyUrl)

URL_SCHEMES = ("http", "https", "ftp")
MAX_URL_LENGTH = 2083
HOST_LABEL = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")
TLD = re.compile(r"^(?:[a-z]{2,}|xn--[a-z0-9-]{2,})$")

# Bounds of the PostgreSQL INTEGER column behind `order`
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class FieldRule:
    attribute: str
    api_name: str
    kind: str
    required: bool = False
    min_length: int = 0
    max_length: int = 0


CREATE_RULES: Tuple[FieldRule, ...] = (
    FieldRule("title", "title", TEXT, required=True, min_length=2, max_length=120),
    FieldRule("description", "description", TEXT, required=True, min_length=10, max_length=3000),
    FieldRule("tech", "tech", TECH),
    FieldRule("github_url", "githubUrl", URL),
    FieldRule("demo_url", "demoUrl", URL),
    FieldRule("featured", "featured", FLAG),
    FieldRule("order", "order", INTEGER),
)

# Same bounds as create, nothing required
UPDATE_RULES: Tuple[FieldRule, ...] = tuple(
    FieldRule(r.attribute, r.api_name, r.kind, False, r.min_length, r.max_length)
    for r in CREATE_RULES
)


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


def is_well_formed_url(value: str) -> bool:
    """
    Check a link the way a browser address bar would accept it.

    "github.com/me", "https://me.dev/x?y=1" and "ftp://files.example.org"
    pass; "localhost", "//cdn.example.com" and "gopher://x.org" do not.
    """
    if not value or len(value) > MAX_URL_LENGTH or any(c.isspace() for c in value):
        return False
    if value.startswith("//"):
        return False

    candidate = value if "://" in value else f"http://{value}"
    try:
        url = _url_adapter.validate_python(candidate)
    except PydanticValidationError:
        return False

    if url.scheme not in URL_SCHEMES or not url.host:
        return False
    if _is_ip(url.host):
        return True

    labels = url.host.lower().split(".")
    if len(labels) < 2 or not TLD.match(labels[-1]):
        return False
    return all(HOST_LABEL.match(label) for label in labels)


def parse_project_id(value: Any) -> Optional[UUID]:
    """Return the UUID for a well-formed project id, None otherwise."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


class Validator:
    """
    Checks raw request fields against a rule set.

    Both entry points return `(schema_or_None, violations)`; callers merge the
    violations with their own (path id, image) before deciding to raise.
    """

    def validate_create(
        self, fields: Mapping[str, Any]
    ) -> Tuple[Optional[ProjectCreate], List[Dict[str, str]]]:
        values, errors = self._check(CREATE_RULES, fields, partial=False)
        if errors:
            return None, errors
        return ProjectCreate(**values), []

    def validate_update(
        self, fields: Mapping[str, Any]
    ) -> Tuple[Optional[ProjectUpdate], List[Dict[str, str]]]:
        values, errors = self._check(UPDATE_RULES, fields, partial=True)
        if errors:
            return None, errors
        return ProjectUpdate(**values), []

    def _check(
        self,
        rules: Tuple[FieldRule, ...],
        fields: Mapping[str, Any],
        partial: bool,
    ) -> Tuple[Dict[str, Any], List[Dict[str, str]]]:
        values: Dict[str, Any] = {}
        errors: List[Dict[str, str]] = []

        for rule in rules:
            raw = fields.get(rule.api_name, _MISSING)

            if raw is _MISSING:
                if rule.required:
                    errors.append(violation(rule.api_name, f"{rule.api_name} is required"))
                continue

            checker = getattr(self, f"_check_{rule.kind}")
            value, error = checker(rule, raw, partial)
            if error:
                errors.append(violation(rule.api_name, error))
            elif value is not _MISSING:
                values[rule.attribute] = value

        if errors:
            logger.debug("Validation failed: %s", errors)
        return values, errors

    # ── Per-kind checks: return (value | _MISSING, error message | None) ──

    def _check_text(self, rule: FieldRule, raw: Any, partial: bool):
        if not isinstance(raw, str):
            return _MISSING, f"{rule.api_name} must be a string"
        value = raw.strip()
        if not rule.min_length <= len(value) <= rule.max_length:
            return _MISSING, (
                f"{rule.api_name} must be between {rule.min_length} "
                f"and {rule.max_length} characters"
            )
        return value, None

    def _check_url(self, rule: FieldRule, raw: Any, partial: bool):
        if raw is None:
            return ("" if not partial else _MISSING), None
        if not isinstance(raw, str):
            return _MISSING, f"{rule.api_name} must be a valid URL"
        value = raw.strip()
        if value and not is_well_formed_url(value):
            return _MISSING, f"{rule.api_name} must be a valid URL"
        return value, None

    def _check_tech(self, rule: FieldRule, raw: Any, partial: bool):
        if partial and not (
            isinstance(raw, (list, tuple)) or (isinstance(raw, str) and raw.strip())
        ):
            return _MISSING, None
        return normalize_tech(raw), None

    def _check_flag(self, rule: FieldRule, raw: Any, partial: bool):
        if partial and raw is None:
            return _MISSING, None
        return to_boolean(raw), None

    def _check_integer(self, rule: FieldRule, raw: Any, partial: bool):
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return _MISSING, None
        value = to_int(raw)
        if value is None:
            if partial:
                return _MISSING, None
            return _MISSING, f"{rule.api_name} must be an integer"
        if not INT32_MIN <= value <= INT32_MAX:
            if partial:
                return _MISSING, None
            return _MISSING, (
                f"{rule.api_name} must be between {INT32_MIN} and {INT32_MAX}"
            )
        return value, None


# ── Singleton Instance ────────────────────────────────────────────────────
validator = Validator()
