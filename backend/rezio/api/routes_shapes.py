"""Drawn-shape endpoints: coordinate normalization and corruption audit."""

from fastapi import APIRouter

from rezio.api.errors import unwrap
from rezio.core.geometry.shapes import find_corrupted_shapes, measure_shape, normalize_coordinates
from rezio.models.schemas import ShapeAuditRequest, ShapeRequest

router = APIRouter(tags=["shapes"])


@router.post("/shapes/normalize")
async def normalize_shape(req: ShapeRequest):
    """Validate a drawn shape and return it with derived measurements."""
    coordinates = unwrap(normalize_coordinates(req.coordinates, req.shape_type))
    measurement = measure_shape(coordinates, req.shape_type, req.radius_ft)
    return {
        "name": req.name,
        "shape_type": req.shape_type,
        "coordinates": coordinates,
        "properties": req.properties,
        **measurement.to_dict(),
    }


@router.post("/shapes/audit")
async def audit_shapes(req: ShapeAuditRequest):
    """Report stored shapes whose coordinates are corrupted."""
    corrupted = find_corrupted_shapes(req.shapes, req.shape_type)
    return {
        "scanned_type": req.shape_type,
        "corrupted": [c.to_dict() for c in corrupted],
        "corrupted_ids": [c.shape_id for c in corrupted],
    }
