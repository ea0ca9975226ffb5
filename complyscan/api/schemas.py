"""Request bodies. Field aliases follow the camelCase wire format."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AnalyzeFileRequest(CamelModel):
    file_url: str = Field(default="", alias="fileUrl")
    file_name: str = Field(default="", alias="fileName")
    file_id: str = Field(default="", alias="fileId")


class AnalyzeTextRequest(CamelModel):
    text: str = Field(default="")
    file_name: str = Field(default="", alias="fileName")


class GeneratePdfRequest(CamelModel):
    analysis: dict[str, Any] | None = None
    file_name: str = Field(default="", alias="fileName")


class SubscriptionUpdateRequest(CamelModel):
    tier: str


class BrandingRequest(CamelModel):
    company_name: str = Field(default="", alias="companyName")
    logo_url: str = Field(default="", alias="logoUrl")
    primary_color: str = Field(default="", alias="primaryColor")


class SettingsRequest(CamelModel):
    digest: dict[str, Any] | None = None
    alerts: dict[str, Any] | None = None
    locations: list[Any] | None = None


class PrivacyAgreementRequest(CamelModel):
    agreed: bool
    agreement_date: str = Field(default="", alias="date")
    dont_show_again: bool = Field(default=False, alias="dontShowAgain")
    user_email: str = Field(default="", alias="userEmail")
    agreement_version: str = Field(default="", alias="agreementVersion")
    ip_address: str = Field(default="", alias="ipAddress")
    user_agent: str = Field(default="", alias="userAgent")
