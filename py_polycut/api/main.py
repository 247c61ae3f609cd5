"""FastAPI main application."""

from typing import List, Literal, Optional, Tuple, Union

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import settings
from ..core.dissection import Dissection, Operation, apply_operations
from ..core.errors import OperationError, PolycutError, ScriptParseError
from ..core.geometry import Polygon
from ..core.query import QueryResult
from ..core.script import run_script
from ..log_config import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Polycut API",
    description="Dissection of convex polygons by non-crossing chords",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Coordinate = Union[int, float]


# Request/Response models
class PolygonRequest(BaseModel):
    """Convex polygon, vertices in boundary order."""

    points: List[Tuple[Coordinate, Coordinate]] = Field(description="Polygon vertices as (x, y) pairs")


class OperationModel(BaseModel):
    """One chord operation; vertex indices are 0-based."""

    type: Literal["insert", "remove", "query"] = Field(description="Operation type")
    a: int = Field(ge=0, description="First vertex index")
    b: int = Field(ge=0, description="Second vertex index")


class DissectionRequest(PolygonRequest):
    """Polygon plus an ordered list of operations."""

    operations: List[OperationModel] = Field(default_factory=list, description="Operations applied in order")


class QueryRequest(PolygonRequest):
    """Polygon, its chords and a query pair."""

    chords: List[Tuple[int, int]] = Field(default_factory=list, description="Active chords")
    a: int = Field(ge=0, description="First query vertex")
    b: int = Field(ge=0, description="Second query vertex")


class ScriptRequest(BaseModel):
    """Text script in the whitespace-separated format (1-based vertices)."""

    script: str = Field(description="Script text")


class PolygonResponse(BaseModel):
    """Validated polygon summary."""

    valid: bool
    vertex_count: int
    area: float
    orientation: str


class RegionModel(BaseModel):
    """A region of the dissection."""

    id: int
    vertices: List[int]
    area: float
    centroid: Tuple[float, float]


class DualEdgeModel(BaseModel):
    """Dual tree edge; ``arc`` is the chord directed as seen from region_a."""

    region_a: int
    region_b: int
    arc: Tuple[int, int]


class QueryResponse(BaseModel):
    """Query path and area split."""

    query: Tuple[int, int]
    start_region: int
    stop_region: int
    path: List[int]
    cover_vertices: List[int]
    kept_area: float
    removed_area: float


class DissectionResponse(BaseModel):
    """Regions, dual tree and optional last query of a dissection."""

    vertex_count: int
    total_area: float
    orientation: str
    chords: List[Tuple[int, int]]
    regions: List[RegionModel]
    edges: List[DualEdgeModel]
    last_query: Optional[QueryResponse] = None


@app.exception_handler(PolycutError)
async def polycut_error_handler(request: Request, exc: PolycutError):
    """Report engine validation failures as 400 responses."""
    logger.info("Request rejected", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    content = {"detail": str(exc), "error_type": type(exc).__name__}
    if isinstance(exc, OperationError):
        content["position"] = exc.position
    if isinstance(exc, ScriptParseError):
        content["token_index"] = exc.token_index
    return JSONResponse(status_code=400, content=content)


def build_polygon(points) -> Polygon:
    return Polygon(points, max_vertices=settings.max_vertices, coordinate_limit=settings.coordinate_limit)


def query_response(result: QueryResult) -> QueryResponse:
    return QueryResponse(
        query=result.query,
        start_region=result.start_region,
        stop_region=result.stop_region,
        path=result.path,
        cover_vertices=result.cover_vertices,
        kept_area=result.kept_area,
        removed_area=result.removed_area,
    )


def dissection_response(dissection: Dissection, last_query: Optional[Tuple[int, int]]) -> DissectionResponse:
    subdivision = dissection.subdivision()
    areas = dissection.region_areas()
    centroids = dissection.region_centroids()

    return DissectionResponse(
        vertex_count=dissection.n,
        total_area=dissection.polygon.area,
        orientation=dissection.polygon.orientation,
        chords=[tuple(chord) for chord in dissection.chords],
        regions=[
            RegionModel(id=i, vertices=vertices, area=areas[i], centroid=centroids[i])
            for i, vertices in enumerate(subdivision.regions)
        ],
        edges=[
            DualEdgeModel(region_a=edge.region_a, region_b=edge.region_b, arc=edge.arc)
            for edge in subdivision.edges
        ],
        last_query=query_response(dissection.query(*last_query)) if last_query else None,
    )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Polycut API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/polygons/validate", response_model=PolygonResponse)
async def validate_polygon(request: PolygonRequest):
    """Check that the points form a strictly convex polygon."""
    polygon = build_polygon(request.points)
    return PolygonResponse(valid=True, vertex_count=polygon.n, area=polygon.area,
                           orientation=polygon.orientation)


@app.post("/dissections", response_model=DissectionResponse)
async def create_dissection(request: DissectionRequest):
    """
    Apply chord operations to a polygon and return its dissection.

    Stops at the first failing operation and reports its 1-based position.
    """
    logger.info("Dissection requested", vertices=len(request.points), operations=len(request.operations))
    dissection = Dissection(build_polygon(request.points))
    operations = [Operation(op.type, op.a, op.b) for op in request.operations]
    last_query = apply_operations(dissection, operations)
    return dissection_response(dissection, last_query)


@app.post("/dissections/query", response_model=QueryResponse)
async def query_dissection(request: QueryRequest):
    """Resolve a query against a polygon and its chords."""
    dissection = Dissection(build_polygon(request.points), request.chords)
    return query_response(dissection.query(request.a, request.b))


@app.post("/scripts", response_model=DissectionResponse)
async def run_text_script(request: ScriptRequest):
    """Run a text script and return the resulting dissection."""
    result = run_script(request.script, max_vertices=settings.max_vertices,
                        coordinate_limit=settings.coordinate_limit)
    return dissection_response(result.dissection, result.last_query)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
