"""
FastAPI web server — stateless JSON endpoints over the layout engine.

Every request carries the full layout and gets the new layout back; the
server keeps no per-session state beyond the bead catalog.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ringlayout.catalog import load_catalog, catalog_to_dict
from ringlayout.engine import operations as ops
from ringlayout.engine.audit import audit_layout
from ringlayout.engine.models import (
    LayoutError, InvalidParameter, DEFAULT_RING_DIVISION,
)
from ringlayout.engine.serialization import (
    layout_to_dict, parse_layout, placed_item_to_dict,
)


log = logging.getLogger(__name__)

# ── Catalog (loaded once) ──────────────────────────────────────────

_catalog_result = load_catalog()
for _err in _catalog_result.errors:
    log.warning("Catalog: %s", _err)
CATALOG = _catalog_result.by_id()

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="Ring Layout")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LayoutError)
async def _layout_error(request: Request, exc: LayoutError):
    """Rejected operations: bad input -> 400, infeasible request -> 409."""
    status = 400 if isinstance(exc, InvalidParameter) else 409
    return JSONResponse(
        status_code=status,
        content={"detail": {"kind": exc.kind, "reason": exc.reason}},
    )


# ── Models ─────────────────────────────────────────────────────────

class LayoutRequest(BaseModel):
    layout: dict


class CanPlaceRequest(LayoutRequest):
    ring: int
    r: float
    theta: float
    item_type: str
    ignore_id: str | None = None


class PlaceRequest(LayoutRequest):
    ring: int
    item_type: str


class RelocateRequest(LayoutRequest):
    item_id: str
    theta: float
    ring: int | None = None


class RemoveRequest(LayoutRequest):
    item_id: str


class RingAddRequest(LayoutRequest):
    radius: float | None = None
    div: int = DEFAULT_RING_DIVISION


class RingRequest(LayoutRequest):
    ring: int


class RingRadiusRequest(RingRequest):
    radius: float


class RingDivisionRequest(RingRequest):
    div: int


class CenterRequest(LayoutRequest):
    item_type: str | None = None


def _reply(layout) -> dict:
    return {"layout": layout_to_dict(layout)}


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/catalog")
def get_catalog():
    """Return every bead type plus any catalog validation errors."""
    return catalog_to_dict(_catalog_result)


@app.post("/api/layout/new")
def new_layout():
    return _reply(ops.new_layout())


@app.post("/api/can_place")
def can_place(req: CanPlaceRequest):
    layout = parse_layout(req.layout)
    ok = ops.can_place(layout, req.ring, req.r, req.theta, req.item_type,
                       CATALOG, ignore_id=req.ignore_id)
    return {"ok": ok}


@app.post("/api/place")
def place(req: PlaceRequest):
    """Place a new bead on a ring; returns the layout and the bead."""
    layout, item = ops.place(parse_layout(req.layout), req.ring, req.item_type, CATALOG)
    return {"layout": layout_to_dict(layout), "item": placed_item_to_dict(item)}


@app.post("/api/relocate")
def relocate(req: RelocateRequest):
    layout = parse_layout(req.layout)
    return _reply(ops.relocate(layout, req.item_id, req.theta, CATALOG, ring_index=req.ring))


@app.post("/api/remove")
def remove(req: RemoveRequest):
    return _reply(ops.remove(parse_layout(req.layout), req.item_id, CATALOG))


@app.post("/api/reset")
def reset(req: LayoutRequest):
    """Drop every bead, keep rings and the center bead."""
    return _reply(ops.reset(parse_layout(req.layout)))


@app.post("/api/ring/add")
def add_ring(req: RingAddRequest):
    return _reply(ops.add_ring(parse_layout(req.layout), req.radius, req.div))


@app.post("/api/ring/remove")
def remove_ring(req: RingRequest):
    return _reply(ops.remove_ring(parse_layout(req.layout), req.ring, CATALOG))


@app.post("/api/ring/radius")
def set_ring_radius(req: RingRadiusRequest):
    """Resize a ring; the reply carries the radius actually applied."""
    layout = ops.set_ring_radius(parse_layout(req.layout), req.ring, req.radius, CATALOG)
    return _reply(layout)


@app.post("/api/ring/division")
def set_ring_division(req: RingDivisionRequest):
    layout = ops.set_ring_division(parse_layout(req.layout), req.ring, req.div, CATALOG)
    return _reply(layout)


@app.post("/api/center")
def set_center(req: CenterRequest):
    """Set (or clear with null) the center bead."""
    layout = ops.set_center_item(parse_layout(req.layout), req.item_type, CATALOG)
    return _reply(layout)


@app.post("/api/diameter")
def diameter(req: LayoutRequest):
    return {"diameter_mm": ops.design_diameter(parse_layout(req.layout), CATALOG)}


@app.post("/api/audit")
def audit(req: LayoutRequest):
    """Re-check a layout with the Shapely auditor."""
    problems = audit_layout(parse_layout(req.layout), CATALOG)
    return {"ok": not problems, "problems": problems}


def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("ringlayout.web.server:app", host=host, port=port, reload=False)
