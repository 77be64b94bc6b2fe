"""Pydantic schemas for API request/response validation.

Geometry payloads (setbacks, boundaries, coordinates, edge labels) are
typed ``Any``; the core validators check them and report specific
error codes.
"""

from __future__ import annotations

import math
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, field_validator

from rezio.core.geometry.shapes import SHAPE_TYPES

AttributeValue = Union[bool, int, float, str]


class ResolveRequest(BaseModel):
    jurisdiction: str
    project_type: str
    attributes: dict[str, AttributeValue] = {}
    project: Optional[dict[str, Any]] = None  # raw project record; merged under attributes

    @field_validator("project_type")
    @classmethod
    def upper_project_type(cls, v: str) -> str:
        return v.strip().upper()


class EngineeringRequest(BaseModel):
    project_type: str
    square_footage: float = 0.0
    stories: int = 1
    property_type: Optional[str] = None
    lot_size: Optional[float] = None

    @field_validator("square_footage")
    @classmethod
    def must_be_non_negative(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError("square_footage must be a finite, non-negative number")
        return v


class TasksRequest(EngineeringRequest):
    project_id: str
    disciplines: list[str] = []  # extra disciplines, e.g. from resolved rules

    @field_validator("project_id")
    @classmethod
    def project_id_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("project_id cannot be empty")
        return v


class SetbacksRequest(BaseModel):
    setbacks: Any = None


class EdgeLabelsRequest(BaseModel):
    boundary: Any = None
    edge_labels: Any = None


class AutoLabelRequest(BaseModel):
    boundary: Any = None
    street_point: Optional[list[float]] = None  # [lon, lat]

    @field_validator("street_point")
    @classmethod
    def must_be_pair(cls, v: Optional[list[float]]) -> Optional[list[float]]:
        if v is not None and (len(v) != 2 or not all(math.isfinite(c) for c in v)):
            raise ValueError("street_point must be [lon, lat]")
        return v


class EnvelopeRequest(BaseModel):
    boundary: Any = None
    setbacks: Any = None
    edge_labels: Any = None


def _known_shape_type(v: str) -> str:
    kind = v.strip().lower()
    if kind not in SHAPE_TYPES:
        raise ValueError(f"shape_type must be one of {sorted(SHAPE_TYPES)}")
    return kind


class ShapeRequest(BaseModel):
    shape_type: str
    coordinates: Any = None
    name: Optional[str] = None
    radius_ft: Optional[float] = None
    properties: dict[str, Any] = {}

    @field_validator("shape_type")
    @classmethod
    def known_shape_type(cls, v: str) -> str:
        return _known_shape_type(v)


class ShapeAuditRequest(BaseModel):
    shapes: list[dict[str, Any]]
    shape_type: Optional[str] = "circle"  # None scans every type

    @field_validator("shape_type")
    @classmethod
    def known_shape_type(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _known_shape_type(v)


class ZoningCheckRequest(BaseModel):
    jurisdiction: str
    zoning_code: str
    structure: Literal["primary", "adu", "garage", "pool"] = "primary"
    setbacks: Any = None  # distances from the structure to each lot line
    lot_size_sq_ft: Optional[float] = None
    proposed_sq_ft: Optional[float] = None

    @field_validator("lot_size_sq_ft", "proposed_sq_ft")
    @classmethod
    def must_be_non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and (not math.isfinite(v) or v < 0):
            raise ValueError("must be a finite, non-negative number")
        return v
