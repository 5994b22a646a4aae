"""
Lead validation — field limits applied to normalized webhook leads before
they are handed to storage.

The limits live on a pydantic model; validate_lead() turns its
ValidationError into "<field>: <message>" strings for the error report.
Reporting only: the processors never drop a lead on these grounds.
"""
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

from leadintake.config import PRIORITIES
from leadintake.processors.base import ProcessedLead

MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_PHONE_LENGTH = 20
MAX_COMPANY_LENGTH = 100
MAX_SOURCE_LENGTH = 50
MAX_VALUE = 1_000_000

PHONE_PATTERN = r'^\+?[\d\s()-]+$'


class StorableLead(BaseModel):
    """The subset of a ProcessedLead that storage constrains."""
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=MAX_PHONE_LENGTH, pattern=PHONE_PATTERN)
    company: Optional[str] = Field(default=None, max_length=MAX_COMPANY_LENGTH)
    source: str = Field(..., max_length=MAX_SOURCE_LENGTH)
    value: Optional[float] = Field(default=None, ge=0, le=MAX_VALUE)
    priority: Optional[str] = None

    @field_validator('email', mode='before')
    @classmethod
    def email_length(cls, value):
        if isinstance(value, str) and len(value) > MAX_EMAIL_LENGTH:
            raise ValueError(f"must be at most {MAX_EMAIL_LENGTH} characters")
        return value

    @field_validator('priority')
    @classmethod
    def known_priority(cls, value):
        if value is not None and value not in PRIORITIES:
            raise ValueError(f"must be one of: {', '.join(PRIORITIES)}")
        return value


def _format_error(error: Dict[str, Any]) -> str:
    field = '.'.join(str(part) for part in error['loc'])
    message = error['msg']
    if error['type'] == 'value_error' and 'error' in error.get('ctx', {}):
        message = str(error['ctx']['error'])
    return f"{field}: {message}"


def validate_lead(lead: ProcessedLead) -> List[str]:
    """Return a list of problems; empty means the lead is storable."""
    try:
        StorableLead(
            name=lead.name,
            email=lead.email,
            phone=lead.phone,
            company=lead.company,
            source=lead.source or '',
            value=lead.value,
            priority=lead.priority,
        )
    except ValidationError as e:
        return [_format_error(error) for error in e.errors()]
    return []


def split_valid_leads(leads: List[ProcessedLead]) -> Tuple[List[ProcessedLead], List[Dict[str, Any]]]:
    """
    Partition leads into storable ones and error reports.

    Returns: (valid_leads, [{"lead": "<name or email>", "errors": [...]}, ...])
    """
    valid, rejected = [], []
    for lead in leads:
        errors = validate_lead(lead)
        if errors:
            rejected.append({'lead': lead.name or lead.email, 'errors': errors})
        else:
            valid.append(lead)
    return valid, rejected
