import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database
from pymongo.errors import PyMongoError

import accounts
import locations
from config import settings
from database import ensure_indexes, get_db
from errors import AuthError, ConflictError, NotFoundError, UpstreamError, ValidationError
from fares import attach_booking_urls, calculate_fares
from schemas import (
    AuthResponse,
    Coordinates,
    FareCompareRequest,
    FareCompareResponse,
    FareEstimateRequest,
    FareEstimateResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    SearchHistoryRequest,
    SearchHistoryResponse,
)

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = get_db()
    if database is not None:
        # unique indexes are the only email / phone guard; startup fails without them
        ensure_indexes(database)
    else:
        logger.warning("DATABASE_URL / DATABASE_NAME not set, account routes will fail")
    yield


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def require_db(database: Optional[Database] = Depends(get_db)) -> Database:
    if database is None:
        raise HTTPException(status_code=500, detail="Database not available")
    return database


# ----------------------
# Users
# ----------------------
users_router = APIRouter(prefix="/api/users", tags=["Users"])


@users_router.post("/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, database: Database = Depends(require_db)):
    try:
        user_id, profile = accounts.register_user(database, payload)
    except (ConflictError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    except PyMongoError:
        logger.exception("Error registering user")
        raise HTTPException(status_code=500, detail="Internal server error")
    return AuthResponse(message="User registered successfully", user_id=user_id, user=profile)


@users_router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, database: Database = Depends(require_db)):
    try:
        user_id, profile = accounts.authenticate_user(database, payload.email, payload.password)
    except NotFoundError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)
    except PyMongoError:
        logger.exception("Login error")
        raise HTTPException(status_code=500, detail="Server error")
    return AuthResponse(message="Login successful", user_id=user_id, user=profile)


@users_router.post("/search-history", response_model=SearchHistoryResponse, status_code=201)
def save_search_history(payload: SearchHistoryRequest, database: Database = Depends(require_db)):
    try:
        history = accounts.append_search_record(
            database,
            payload.user_id,
            payload.pickup_location,
            payload.dropoff_location,
            payload.selected_ride,
            payload.fare_amount,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PyMongoError:
        logger.exception("Error saving search history")
        raise HTTPException(status_code=500, detail="Server error")
    return SearchHistoryResponse(message="Search history saved successfully", search_history=history)


@users_router.get("/{user_id}", response_model=ProfileResponse)
def get_profile(user_id: str, database: Database = Depends(require_db)):
    try:
        return accounts.get_user_profile(database, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PyMongoError:
        logger.exception("Error fetching profile")
        raise HTTPException(status_code=500, detail="Server error")


# ----------------------
# Fares
# ----------------------
fares_router = APIRouter(prefix="/api/fares", tags=["Fares"])


@fares_router.post("/estimate", response_model=FareEstimateResponse)
def estimate(payload: FareEstimateRequest):
    all_fares, cheapest = calculate_fares(payload.distance_km)
    return FareEstimateResponse(all_fares=all_fares, cheapest=cheapest)


@fares_router.post("/compare", response_model=FareCompareResponse)
def compare(payload: FareCompareRequest):
    try:
        distance_km = locations.route_distance_km(
            payload.pickup_location.coordinates,
            payload.dropoff_location.coordinates,
        )
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=e.message)

    all_fares, cheapest = calculate_fares(distance_km)
    attach_booking_urls(all_fares, payload.pickup_location, payload.dropoff_location)
    return FareCompareResponse(distance_km=distance_km, all_fares=all_fares, cheapest=cheapest)


# ----------------------
# Geocoding (Nominatim) and routing (OSRM)
# ----------------------
geo_router = APIRouter(prefix="/api/geo", tags=["Locations"])


@geo_router.get("/search")
def geocode_search(q: str = Query(..., min_length=3), limit: int = Query(5, ge=1, le=10)):
    try:
        results = locations.search_addresses(q, limit)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return {"results": [r.model_dump(by_alias=True) for r in results]}


@geo_router.get("/reverse")
def geocode_reverse(lat: float = Query(..., ge=-90, le=90), lng: float = Query(..., ge=-180, le=180)):
    try:
        return {"displayName": locations.reverse_geocode(lat, lng)}
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=e.message)


@geo_router.get("/distance")
def route_distance(
    from_lat: float = Query(..., ge=-90, le=90),
    from_lng: float = Query(..., ge=-180, le=180),
    to_lat: float = Query(..., ge=-90, le=90),
    to_lng: float = Query(..., ge=-180, le=180),
):
    try:
        meters = locations.route_distance_meters(
            Coordinates(lat=from_lat, lng=from_lng),
            Coordinates(lat=to_lat, lng=to_lng),
        )
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return {"distanceMeters": meters, "distanceKm": round(meters / 1000.0, 2)}


app.include_router(users_router)
app.include_router(fares_router)
app.include_router(geo_router)


# ----------------------
# Routes
# ----------------------
@app.get("/")
def root():
    return {"name": settings.API_TITLE, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok", "message": "Server is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
