import logging
import os
from typing import Dict

from fastapi import FastAPI, HTTPException, Query

from hexmap.shared.hex_math import CubeCoordinate
from hexmap.shared.schemas import (
    DistanceResult, HexCoord, MapDefinition, MapSummary, SightResult, TileList
)
from hexmap.server.engine import MapSession, TileNotFound

# --- Logging Setup ---
logger = logging.getLogger("hexmap.server")
logger.setLevel(logging.INFO)
console_handler = logging.StreamHandler()
log_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
console_handler.setFormatter(log_format)
logger.addHandler(console_handler)

# --- Configuration Loading Helpers ---

MAP_DIR = os.getenv("MAP_DIR", "maps")

def load_map_definition(map_id: str) -> MapDefinition:
    """Loads {map_id}.json from MAP_DIR."""
    path = os.path.join(MAP_DIR, f"{map_id}.json")
    if not os.path.exists(path):
        raise FileNotFoundError(f"Map definition not found: {path}")

    with open(path, 'r') as f:
        return MapDefinition.model_validate_json(f.read())

# --- Global State ---
sessions: Dict[str, MapSession] = {}

app = FastAPI()

# --- Helpers ---

def get_session(map_id: str) -> MapSession:
    """Returns the live session, lazily loading the map file on first access."""
    if map_id in sessions:
        return sessions[map_id]

    try:
        definition = load_map_definition(map_id)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Map not found: {e}")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load map {map_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error during map load")

    # Two first requests may race to load the same file; keep whichever landed first
    session = sessions.setdefault(map_id, MapSession(map_id, definition))
    logger.info(f"Loaded map {map_id} from {MAP_DIR} ({len(session.grid)} tiles)")
    return session

def to_cube(x: int, y: int, z: int) -> CubeCoordinate:
    try:
        return CubeCoordinate(x, y, z)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

def tile_lookup(fn, *args):
    """Calls a session query, turning a missing endpoint tile into a 404."""
    try:
        return fn(*args)
    except TileNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

# --- Routes ---

@app.get("/")
def health_check():
    return {"status": "ok", "maps": list(sessions.keys())}

@app.post("/maps/{map_id}", response_model=MapSummary, status_code=201)
def create_map(map_id: str, definition: MapDefinition):
    # Maps are populated once; replacing one would mutate a grid under readers
    if map_id in sessions:
        raise HTTPException(status_code=409, detail=f"Map {map_id} already exists")

    session = MapSession(map_id, definition)
    # setdefault is atomic, so a concurrent create of the same id cannot replace this one
    if sessions.setdefault(map_id, session) is not session:
        raise HTTPException(status_code=409, detail=f"Map {map_id} already exists")
    logger.info(f"Created map {map_id}: {definition.config.width}x{definition.config.height}, {len(session.grid)} tiles")
    return session.summary()

@app.get("/maps/{map_id}", response_model=MapSummary)
def map_summary(map_id: str):
    return get_session(map_id).summary()

@app.get("/maps/{map_id}/distance", response_model=DistanceResult)
def distance(map_id: str, ax: int, ay: int, az: int, bx: int, by: int, bz: int):
    session = get_session(map_id)
    a, b = to_cube(ax, ay, az), to_cube(bx, by, bz)
    d = tile_lookup(session.distance, a, b)
    return DistanceResult(a=HexCoord.from_cube(a), b=HexCoord.from_cube(b), distance=d)

@app.get("/maps/{map_id}/line", response_model=TileList)
def line(map_id: str, ax: int, ay: int, az: int, bx: int, by: int, bz: int):
    session = get_session(map_id)
    tiles = tile_lookup(session.line, to_cube(ax, ay, az), to_cube(bx, by, bz))
    return TileList(tiles=tiles)

@app.get("/maps/{map_id}/sight", response_model=SightResult)
def sight(map_id: str, ax: int, ay: int, az: int, bx: int, by: int, bz: int):
    session = get_session(map_id)
    a, b = to_cube(ax, ay, az), to_cube(bx, by, bz)
    clear = tile_lookup(session.line_of_sight, a, b)
    return SightResult(a=HexCoord.from_cube(a), b=HexCoord.from_cube(b), clear=clear)

@app.get("/maps/{map_id}/neighbors", response_model=TileList)
def neighbors(map_id: str, x: int, y: int, z: int):
    session = get_session(map_id)
    return TileList(tiles=tile_lookup(session.neighbors, to_cube(x, y, z)))

@app.get("/maps/{map_id}/visible", response_model=TileList)
def visible(map_id: str, x: int, y: int, z: int, radius: int = Query(default=1, ge=0)):
    session = get_session(map_id)
    return TileList(tiles=tile_lookup(session.visible, to_cube(x, y, z), radius))
