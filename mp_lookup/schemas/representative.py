"""Pydantic schemas for directory lookups and selected representatives."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class RepresentativeRecord(BaseModel):
    """One elected official as returned by the Represent API.

    Labels are free text and not normalized upstream; unknown fields are kept
    so the record can be passed through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None, description="Display name of the official.")
    elected_office: str | None = Field(
        default=None,
        description="Office held, e.g. 'MP', 'MPP', 'Councillor'.",
    )
    representative_set_name: str | None = Field(
        default=None,
        description="Governing body, e.g. 'House of Commons', 'Ontario'.",
    )
    district_name: str | None = Field(default=None, description="Electoral district label.")
    email: str | None = Field(default=None, description="Contact email, when published.")


class DirectoryResponse(BaseModel):
    """Postcode lookup payload. Only the centroid representatives are used."""

    model_config = ConfigDict(extra="allow")

    representatives_centroid: List[RepresentativeRecord] | None = Field(
        default=None,
        description="Officials whose districts contain the postcode centroid.",
    )


class RepresentativeContact(BaseModel):
    """Selected representative projected for display and email composition."""

    name: str = Field(..., description="Display name of the representative.")
    riding: str = Field(..., description="Electoral district (riding) name.")
    email: str = Field(..., description="Address the email will be sent to.")
    email_derived: bool = Field(
        default=False,
        description="True when the address was derived from the name (best effort).",
    )
    elected_office: str | None = Field(default=None, description="Office label as published.")
    representative_set_name: str | None = Field(
        default=None,
        description="Governing body label as published.",
    )
