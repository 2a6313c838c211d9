"""Canonical Pydantic models and enumerations shared across streampay-cli.

**Configuration models** -- serialised as JSON in the user's config
directory or resolved at startup:
    :class:`StoredConfig`, :class:`RequestConfig`, and :class:`Credential`.

**Enumerations** -- the closed value sets the StreamPay API accepts.
Commands use them as Typer option types (so invalid values are rejected
before any request is sent) and :mod:`streampay_cli.params` uses them to
validate comma-separated lists.

API responses are deliberately *not* modelled: the CLI passes decoded
JSON through untouched and only interprets the pagination envelope when
rendering.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_BASE_URL = "https://stream-app-service.streampay.sa/api/v2"


# --- Output ---


class ResponseFormat(str, enum.Enum):
    """Per-command rendering of API responses (``--format``)."""

    JSON = "json"
    TABLE = "table"
    PRETTY = "pretty"


# --- Configuration ---


class StoredConfig(BaseModel):
    """Settings persisted in ``config.json`` by ``streampay login`` / ``config set``.

    Every field is optional; unknown keys found on disk are ignored so an
    older or hand-edited file never breaks the CLI.
    """

    model_config = ConfigDict(extra="ignore")

    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    base_url: Optional[str] = None
    branch: Optional[str] = None
    default_format: Optional[ResponseFormat] = None


class RequestConfig(BaseModel):
    """HTTP request settings applied to every API call."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class Credential(BaseModel):
    """Resolved credentials handed to :class:`~streampay_cli.client.StreamPayClient`.

    Built once per invocation by :func:`~streampay_cli.config.resolve_credential`
    after applying the flag > environment > config file > ``.env``
    precedence, then frozen for the lifetime of the process.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str
    api_secret: Optional[str] = None
    branch: Optional[str] = None
    base_url: Optional[str] = None

    @property
    def effective_base_url(self) -> str:
        """The configured base URL, or the production default."""
        return self.base_url or DEFAULT_BASE_URL


# --- API enumerations ---


class Currency(str, enum.Enum):
    SAR = "SAR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    AED = "AED"
    BHD = "BHD"
    KWD = "KWD"
    OMR = "OMR"
    QAR = "QAR"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    CREATED = "CREATED"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"
    EXPIRED = "EXPIRED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    FAILED_INITIATION = "FAILED_INITIATION"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    UNDER_REVIEW = "UNDER_REVIEW"
    EXPIRED = "EXPIRED"
    SETTLED = "SETTLED"
    REFUNDED = "REFUNDED"


class SubscriptionStatus(str, enum.Enum):
    INACTIVE = "INACTIVE"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELED = "CANCELED"
    FROZEN = "FROZEN"


class PaymentLinkStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"


class ContactInformationType(str, enum.Enum):
    PHONE = "PHONE"
    EMAIL = "EMAIL"


class PreferredLanguage(str, enum.Enum):
    AR = "AR"
    EN = "EN"


class CommunicationMethod(str, enum.Enum):
    WHATSAPP = "WHATSAPP"
    EMAIL = "EMAIL"
    SMS = "SMS"


class ManualPaymentMethod(str, enum.Enum):
    """Payment methods that can be recorded by hand with ``payments mark-paid``."""

    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    QURRAH = "QURRAH"


class RefundReason(str, enum.Enum):
    REQUESTED_BY_CUSTOMER = "REQUESTED_BY_CUSTOMER"
    DUPLICATE = "DUPLICATE"
    FRAUDULENT = "FRAUDULENT"
    OTHER = "OTHER"


class ProductType(str, enum.Enum):
    RECURRING = "RECURRING"
    ONE_OFF = "ONE_OFF"


class RecurringInterval(str, enum.Enum):
    WEEK = "WEEK"
    MONTH = "MONTH"
    SEMESTER = "SEMESTER"
    YEAR = "YEAR"
