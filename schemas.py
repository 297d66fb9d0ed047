"""
Database Schemas for Fare Compare

Each Pydantic model here either describes a MongoDB collection document or a
request / response body. Documents are stored with snake_case keys; the wire
format is camelCase, so every model accepts both and serialises by alias.

- User -> "user" (search history is embedded as a list of SearchRecord)
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

RidePlatform = Literal["Uber", "Ola"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")


class Location(CamelModel):
    name: str = Field(..., description="Display name picked by the user")
    coordinates: Coordinates


class SearchRecord(CamelModel):
    """
    One fare comparison the user acted on. Embedded in User.search_history,
    appended only.
    """
    pickup_location: Location
    dropoff_location: Location
    selected_ride: RidePlatform
    fare_amount: float = Field(..., ge=0)
    timestamp: datetime


class User(BaseModel):
    """
    Users collection schema
    Collection name: "user"
    """
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Lowercased email address, unique")
    phone: str = Field(..., description="10 digit phone number, unique")
    password_hash: str = Field(..., description="bcrypt hash")
    search_history: List[SearchRecord] = Field(default_factory=list)


# ----------------------
# Request bodies
# ----------------------
class RegisterRequest(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., pattern=r"^[0-9]{10}$", description="Exactly 10 digits")
    password: str = Field(..., min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SearchHistoryRequest(CamelModel):
    user_id: Optional[str] = None
    pickup_location: Location
    dropoff_location: Location
    selected_ride: RidePlatform
    fare_amount: float = Field(..., ge=0)


class FareEstimateRequest(CamelModel):
    distance_km: float = Field(..., ge=0)


class FareCompareRequest(CamelModel):
    pickup_location: Location
    dropoff_location: Location


# ----------------------
# Response bodies
# ----------------------
class PublicProfile(CamelModel):
    first_name: str
    last_name: str
    email: str


class AuthResponse(CamelModel):
    message: str
    user_id: str
    user: PublicProfile


class SearchHistoryResponse(CamelModel):
    message: str
    search_history: List[SearchRecord]


class ProfileResponse(CamelModel):
    user_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    created_at: Optional[datetime] = None
    search_history: List[SearchRecord]


class FareBreakdown(CamelModel):
    base_fare: float
    distance_cost: float


class FareQuote(CamelModel):
    type: str
    fare: str = Field(..., description="Total fare with two decimals")
    breakdown: FareBreakdown
    platform: RidePlatform
    booking_url: Optional[str] = None


class FareEstimateResponse(CamelModel):
    all_fares: List[FareQuote]
    cheapest: FareQuote


class FareCompareResponse(FareEstimateResponse):
    distance_km: float


class AddressSuggestion(CamelModel):
    display_name: str
    lat: float
    lon: float
