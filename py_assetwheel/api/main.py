"""FastAPI main application."""

from typing import Dict, List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.geometry import polygon_to_path
from ..core.layout import packing_layout, partition_layout
from ..logging_config import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Asset Wheel Layout API",
    description="Voronoi and circle packing layouts for wallet holdings",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Point = Tuple[float, float]


class ItemMetadata(BaseModel):
    """Display metadata for one item; ignored by the geometry."""

    logo_url: Optional[str] = None
    name: Optional[str] = None


# Request/Response models
class LayoutRequest(BaseModel):
    """Holdings to lay out."""

    holdings: Dict[str, Dict[str, float]] = Field(..., description="group -> item -> amount")
    prices: Optional[Dict[str, Dict[str, float]]] = Field(None, description="group -> item -> dollar value")
    colors: Optional[Dict[str, str]] = Field(None, description="group -> color tag")
    metadata: Optional[Dict[str, Dict[str, ItemMetadata]]] = Field(None, description="group -> item -> metadata")
    seed: Optional[int] = Field(None, ge=0, le=0xFFFFFFFF, description="Layout seed")
    disk_radius: Optional[float] = Field(None, gt=0, le=10000, description="Disk radius")


class ItemCellResponse(BaseModel):
    group_id: str
    item_id: str
    polygon: List[Point]
    centroid: Point
    path: str
    color: str
    amount: float
    visual_weight: float
    metadata: Optional[ItemMetadata] = None


class GroupLabelResponse(BaseModel):
    group_id: str
    anchor: Point
    color: str


class PartitionResponse(BaseModel):
    """Nested Voronoi layout."""

    cells: List[ItemCellResponse]
    labels: List[GroupLabelResponse]
    coverage: float


class CircleResponse(BaseModel):
    id: str
    group_id: str
    item_id: str
    radius: float
    center: Point
    anchor: Point
    color: str
    amount: float
    visual_weight: float
    metadata: Optional[ItemMetadata] = None


class PackingResponse(BaseModel):
    """Circle packing layout."""

    circles: List[CircleResponse]
    pointer_targets: Dict[str, str] = Field(..., description="group -> circle id")
    seed: Optional[int]


def _point(p) -> Point:
    return (float(p[0]), float(p[1]))


def _metadata(request: LayoutRequest, group_id: str, item_id: str) -> Optional[ItemMetadata]:
    if not request.metadata:
        return None
    return request.metadata.get(group_id, {}).get(item_id)


def _overrides(request: LayoutRequest) -> dict:
    overrides = {}
    if request.seed is not None:
        overrides["seed"] = request.seed
    if request.disk_radius is not None:
        overrides["disk_radius"] = request.disk_radius
    return overrides


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Asset Wheel Layout API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/layouts/partition", response_model=PartitionResponse)
def create_partition_layout(request: LayoutRequest):
    """Compute the nested Voronoi layout of the holdings."""
    logger.info("Partition layout requested", groups=len(request.holdings), seed=request.seed)

    try:
        options = settings.partition_options(**_overrides(request))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    layout = partition_layout(request.holdings, request.prices, request.colors, options)

    return PartitionResponse(
        cells=[
            ItemCellResponse(
                group_id=cell.group_id,
                item_id=cell.item_id,
                polygon=[_point(p) for p in cell.polygon.points],
                centroid=_point(cell.centroid),
                path=polygon_to_path(cell.polygon),
                color=cell.color,
                amount=cell.raw_amount,
                visual_weight=cell.visual_weight,
                metadata=_metadata(request, cell.group_id, cell.item_id),
            )
            for cell in layout.items
        ],
        labels=[
            GroupLabelResponse(group_id=label.group_id, anchor=_point(label.anchor), color=label.color)
            for label in layout.labels
        ],
        coverage=layout.coverage,
    )


@app.post("/layouts/packing", response_model=PackingResponse)
def create_packing_layout(request: LayoutRequest):
    """Compute the circle packing layout of the holdings."""
    logger.info("Packing layout requested", groups=len(request.holdings), seed=request.seed)

    try:
        options = settings.packing_options(**_overrides(request))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    layout = packing_layout(request.holdings, request.prices, request.colors, options)

    return PackingResponse(
        circles=[
            CircleResponse(
                id=node.id,
                group_id=node.group_id,
                item_id=node.item_id,
                radius=node.radius,
                center=_point(node.position),
                anchor=_point(node.anchor_position),
                color=node.color,
                amount=node.raw_amount,
                visual_weight=node.visual_weight,
                metadata=_metadata(request, node.group_id, node.item_id),
            )
            for node in layout.nodes
        ],
        pointer_targets={group_id: node.id for group_id, node in layout.pointer_targets.items()},
        seed=layout.seed,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
