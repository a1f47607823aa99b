# 📦 /schemas/schemas.py

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PublicProfile(BaseModel):
    """Row from the public `User` table; unknown columns are kept."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    city: Optional[str] = None
    position: Optional[str] = None
    looking_for: List[str] = []
    relationship_status: Optional[str] = None
    time_horizon: Optional[str] = None
    smoking: Optional[str] = None
    drinking: Optional[str] = None
    fitness: Optional[str] = None
    scene_affinity: List[str] = []
    photos: List[Any] = []
    bio: Optional[str] = None
    tags: List[str] = []
    verified: bool = False
    last_seen: Optional[datetime] = None
    last_lat: Optional[float] = None
    last_lng: Optional[float] = None


class PrivateProfile(BaseModel):
    """Row from `user_private_profile`; only read server-side."""
    model_config = ConfigDict(extra="allow")

    kinks: List[str] = []
    hard_limits: List[str] = []
    soft_limits: List[str] = []
    position: Optional[str] = None
    chem_visibility_enabled: bool = False
    chem_friendly: Optional[str] = None
    hosting: Optional[str] = None


class ScoreRequest(BaseModel):
    travel_time_minutes: Optional[float] = Field(None, alias="travelTimeMinutes")
    user_profile: PublicProfile = Field(default_factory=PublicProfile, alias="userProfile")
    match_profile: PublicProfile = Field(default_factory=PublicProfile, alias="matchProfile")
    user_private_profile: Optional[PrivateProfile] = Field(None, alias="userPrivateProfile")
    match_private_profile: Optional[PrivateProfile] = Field(None, alias="matchPrivateProfile")
    user_embedding: Optional[List[float]] = Field(None, alias="userEmbedding")
    match_embedding: Optional[List[float]] = Field(None, alias="matchEmbedding")

    model_config = ConfigDict(populate_by_name=True)


class ScoreResponse(BaseModel):
    matchProbability: int
    breakdown: dict[str, int]
    scoringVersion: str


class MatchProbabilityResponse(BaseModel):
    matchProbability: Optional[int] = None
    matchBreakdown: Optional[dict[str, int]] = None
    travelTimeMinutes: Optional[int] = None
    distanceKm: Optional[float] = None
    scoringVersion: Optional[str] = None
    message: Optional[str] = None


class HealthCheckResponse(BaseModel):
    status: str
    message: str
    version: str


class ErrorResponse(BaseModel):
    status: str
    message: str
    info: Optional[str | dict] = None
