from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Report:
    """A persisted analysis of one uploaded document."""

    id: str
    user_id: str
    file_name: str
    file_url: str = ""
    analysis: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "fileName": self.file_name,
            "fileUrl": self.file_url,
            "analysis": self.analysis,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class PrivacyAgreement:
    """A user's acceptance of the legal agreement."""

    id: str
    user_id: str
    user_email: str = ""
    agreed: bool = True
    agreement_date: str = ""
    dont_show_again: bool = False
    ip_address: str = ""
    user_agent: str = ""
    agreement_text: str = ""
    agreement_version: str = "2.0"
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "userEmail": self.user_email,
            "agreed": self.agreed,
            "agreementDate": self.agreement_date,
            "dontShowAgain": self.dont_show_again,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "agreementText": self.agreement_text,
            "agreementVersion": self.agreement_version,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class SaveOutcome:
    """Result of writing one record to the primary and backup stores."""

    primary_saved: bool
    backup_saved: bool
    errors: tuple[str, ...] = ()

    @property
    def saved(self) -> bool:
        return self.primary_saved or self.backup_saved
