"""Pydantic models for the informational endpoints."""

from typing import List

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    lat: float = Field(..., examples=[-1.286389])
    lng: float = Field(..., examples=[36.817223])


class ServiceInfo(BaseModel):
    """Basic facts about the running service."""

    project_name: str
    version: str
    store: str = Field(..., examples=["connected"])
    amenities: List[str]
