# backend/skilloop/schemas/analytics.py
from typing import Dict, List

from pydantic import BaseModel

from .base import Money


class MonthlyBookings(BaseModel):
    month: str
    bookings: int
    revenue: Money


class MonthlyRegistrations(BaseModel):
    month: str
    users: int


class AnalyticsOverview(BaseModel):
    monthly_bookings: List[MonthlyBookings]
    monthly_registrations: List[MonthlyRegistrations]
    specializations: Dict[str, int]
    total_revenue: Money
    total_bookings: int
    total_users: int


class TrainerPerformance(BaseModel):
    trainer_id: str
    name: str
    specialization: str | None = None
    total_bookings: int
    completed_bookings: int
    total_earnings: Money
    average_rating: Money
    completion_rate: Money
    growth_rate: Money


class TopTrainersResponse(BaseModel):
    by_earnings: List[TrainerPerformance]
    by_rating: List[TrainerPerformance]
    by_bookings: List[TrainerPerformance]
    fastest_growing: List[TrainerPerformance]
