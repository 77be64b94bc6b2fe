"""Rezio Zoning Engine: FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rezio.config import settings
from rezio.api.routes_requirements import router as requirements_router
from rezio.api.routes_parcels import router as parcels_router
from rezio.api.routes_shapes import router as shapes_router
from rezio.api.routes_roadmap import router as roadmap_router
from rezio.api.routes_zoning import router as zoning_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Zoning requirement resolution, setback validation and permit roadmaps.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(requirements_router, prefix="/api")
app.include_router(parcels_router, prefix="/api")
app.include_router(shapes_router, prefix="/api")
app.include_router(roadmap_router, prefix="/api")
app.include_router(zoning_router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
