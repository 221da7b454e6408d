"""Pydantic response models for the handover HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class HandoverSummary(BaseModel):
    id: str
    registration: str
    vehicle: str
    date: str
    status: str
    kind: str
    inspector_name: str
    updated_at: str | None = None


class HandoverListResponse(BaseModel):
    handovers: list[HandoverSummary]


class VehicleResponse(BaseModel):
    id: str
    make: str
    model: str
    registration: str


class HandoverResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    vehicle_id: str
    inspector_name: str
    date: str
    mileage: int | None = None
    other_comments: str | None = None
    status: str
    kind: str
    updated_at: str | None = None


class CheckResponse(BaseModel):
    check_item_key: str
    label: str
    checked: bool
    comments: str | None = None


class TyreResponse(BaseModel):
    position: str
    size: str | None = None
    depth: str | None = None
    brand: str | None = None
    tyre_type: str


class PhotoResponse(BaseModel):
    category: str
    remote_url: str
    caption: str | None = None


class HandoverDetailResponse(BaseModel):
    handover: HandoverResponse
    vehicle: VehicleResponse
    checks: list[CheckResponse] = Field(default_factory=list)
    tyres: list[TyreResponse] = Field(default_factory=list)
    photos: list[PhotoResponse] = Field(default_factory=list)
