"""Bookable service offering."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ServiceCategory(str, Enum):
    HAIR = 'hair'
    SKIN = 'skin'
    MASSAGE = 'massage'
    NAILS = 'nails'
    SPA = 'spa'


@dataclass
class Service:
    """Domain model representing a service a business offers."""
    id: str
    name: str
    category: ServiceCategory
    duration: int  # minutes
    price: float
    is_active: bool = True
    description: str | None = None
    image: str | None = None
    business_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
