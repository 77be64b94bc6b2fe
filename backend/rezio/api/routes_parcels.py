"""Parcel endpoints: setbacks, edge labels and the buildable envelope."""

from fastapi import APIRouter

from rezio.api.errors import unwrap
from rezio.core.geometry.boundary import normalize_boundary_ring
from rezio.core.geometry.edge_labels import auto_label_edges
from rezio.core.geometry.parcel import build_parcel_geometry
from rezio.core.geometry.setbacks import validate_edge_labels, validate_setbacks
from rezio.models.schemas import (
    AutoLabelRequest,
    EdgeLabelsRequest,
    EnvelopeRequest,
    SetbacksRequest,
)

router = APIRouter(tags=["parcels"])


@router.post("/setbacks/validate")
async def validate_setbacks_endpoint(req: SetbacksRequest):
    """Validate and normalize a four-sided setback record."""
    setbacks = unwrap(validate_setbacks(req.setbacks))
    return {"valid": True, "setbacks": setbacks.to_dict()}


@router.post("/parcels/edge-labels/validate")
async def validate_edge_labels_endpoint(req: EdgeLabelsRequest):
    """Validate edge labels against the parcel's boundary ring."""
    ring = unwrap(normalize_boundary_ring(req.boundary))
    labels = unwrap(validate_edge_labels(req.edge_labels, len(ring)))
    return {
        "valid": True,
        "ring_length": len(ring),
        "edge_labels": [label.to_dict() for label in labels],
    }


@router.post("/parcels/edge-labels/auto")
async def auto_label_endpoint(req: AutoLabelRequest):
    """Label boundary edges front/rear/left/right from the street point."""
    ring = unwrap(normalize_boundary_ring(req.boundary))
    street = tuple(req.street_point) if req.street_point else None
    result = auto_label_edges(ring, street)
    return result.to_dict()


@router.post("/parcels/envelope")
async def envelope_endpoint(req: EnvelopeRequest):
    """Compute the buildable envelope left after setbacks."""
    ring = unwrap(normalize_boundary_ring(req.boundary))
    setbacks = unwrap(validate_setbacks(req.setbacks))
    labels = unwrap(validate_edge_labels(req.edge_labels, len(ring)))
    parcel = build_parcel_geometry(ring, setbacks, labels)
    return parcel.to_dict()
