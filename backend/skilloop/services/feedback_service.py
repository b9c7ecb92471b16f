# backend/skilloop/services/feedback_service.py
"""
Feedback links.

A trainer shares a tokenized link after delivering a session; attendees
rate the session through it without an account.
"""

from datetime import timedelta
from decimal import Decimal
import logging
import secrets
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import FEEDBACK_ELIGIBLE_STATUSES
from ..core.exceptions import BusinessRuleException, ForbiddenException, NotFoundException
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.feedback import FeedbackLink, FeedbackResponse
from ..models.trainer import Trainer
from ..repositories.factory import RepositoryFactory
from ..schemas.feedback import FeedbackSubmit
from . import ledger
from .base import BaseService

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def feedback_stats(responses: Iterable[FeedbackResponse]) -> Dict[str, Any]:
    """Response count, mean rating and the share who would recommend, in percent."""
    items = list(responses)
    total = len(items)
    if not total:
        return {"total_responses": 0, "average_rating": ledger.ZERO, "recommendation_rate": ledger.ZERO}
    average = ledger.money(Decimal(sum(r.rating for r in items)) / total)
    recommended = sum(1 for r in items if r.would_recommend)
    return {
        "total_responses": total,
        "average_rating": average,
        "recommendation_rate": ledger.money(Decimal(recommended) * 100 / total),
    }


class FeedbackService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.link_repository = RepositoryFactory.create_feedback_link_repository(db)
        self.response_repository = RepositoryFactory.create_feedback_response_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)

    @staticmethod
    def link_url(token: str) -> str:
        return f"{settings.frontend_url.rstrip('/')}/feedback/{token}"

    def describe_link(self, link: FeedbackLink) -> Dict[str, Any]:
        return {
            "id": link.id,
            "booking_id": link.booking_id,
            "token": link.token,
            "is_active": link.is_active,
            "expires_at": link.expires_at,
            "url": self.link_url(link.token),
        }

    @BaseService.measure_operation("create_feedback_link")
    def create_link(self, trainer: Trainer, booking_id: str) -> Dict[str, Any]:
        """Return the booking's active link, creating one when none is live."""
        booking = self.booking_repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if booking.trainer_id != trainer.id:
            raise ForbiddenException("This booking is not assigned to you", code="NOT_ASSIGNED_TRAINER")
        if booking.status not in FEEDBACK_ELIGIBLE_STATUSES:
            raise BusinessRuleException(
                "Feedback can be collected once the session is delivered",
                code="FEEDBACK_NOT_AVAILABLE",
                details={"status": booking.status},
            )

        now = utc_now()
        existing = self.link_repository.get_active_for_booking(booking.id, now)
        if existing:
            return self.describe_link(existing)

        with self.transaction():
            link = self.link_repository.create(
                booking_id=booking.id,
                token=secrets.token_urlsafe(TOKEN_BYTES),
                is_active=True,
                expires_at=now + timedelta(days=settings.feedback_link_ttl_days),
            )
        self.log_operation("create_feedback_link", booking_id=booking.id, link_id=link.id)
        return self.describe_link(link)

    def _valid_link(self, token: str) -> FeedbackLink:
        link = self.link_repository.get_by_token(token)
        if not link or not link.is_valid(utc_now()):
            raise NotFoundException("This feedback link is invalid or has expired", code="FEEDBACK_LINK_INVALID")
        return link

    def get_context(self, token: str) -> Dict[str, Any]:
        link = self._valid_link(token)
        booking = link.booking
        trainer = booking.trainer
        return {
            "training_topic": booking.training_topic,
            "start_time": ensure_utc(booking.start_time),
            "trainer_name": trainer.name if trainer else None,
            "trainer_title": trainer.title if trainer else None,
        }

    @BaseService.measure_operation("submit_feedback")
    def submit(self, token: str, data: FeedbackSubmit) -> FeedbackResponse:
        link = self._valid_link(token)
        with self.transaction():
            response = self.response_repository.create(
                feedback_link_id=link.id,
                respondent_name=data.respondent_name,
                respondent_email=str(data.respondent_email).lower(),
                organization_name=data.organization_name,
                rating=data.rating,
                communication_rating=data.communication_rating,
                punctuality_rating=data.punctuality_rating,
                skills_rating=data.skills_rating,
                would_recommend=data.would_recommend,
                review_comment=data.review_comment,
            )
        return response

    def deactivate(self, trainer: Trainer, link_id: str) -> FeedbackLink:
        link = self.link_repository.get_by_id(link_id)
        if not link:
            raise NotFoundException("Feedback link not found", code="FEEDBACK_LINK_NOT_FOUND")
        if link.booking.trainer_id != trainer.id:
            raise ForbiddenException("This feedback link is not yours", code="NOT_OWNER")
        with self.transaction():
            link.is_active = False
            self.link_repository.flush()
        return link

    @staticmethod
    def _response_item(response: FeedbackResponse) -> Dict[str, Any]:
        booking = response.link.booking if response.link else None
        return {
            "id": response.id,
            "feedback_link_id": response.feedback_link_id,
            "respondent_name": response.respondent_name,
            "respondent_email": response.respondent_email,
            "organization_name": response.organization_name,
            "rating": response.rating,
            "communication_rating": response.communication_rating,
            "punctuality_rating": response.punctuality_rating,
            "skills_rating": response.skills_rating,
            "would_recommend": response.would_recommend,
            "review_comment": response.review_comment,
            "submitted_at": response.submitted_at,
            "training_topic": booking.training_topic if booking else None,
        }

    @BaseService.measure_operation("trainer_feedback")
    def trainer_feedback(self, trainer: Trainer) -> Dict[str, Any]:
        responses = self.response_repository.list_for_trainer(trainer.id)
        return {
            "responses": [self._response_item(r) for r in responses],
            "stats": feedback_stats(responses),
        }

    @BaseService.measure_operation("admin_feedback_overview")
    def admin_overview(self, q: Optional[str] = None) -> List[Dict[str, Any]]:
        """Per-trainer feedback stats with the number of live links."""
        now = utc_now()
        by_trainer: Dict[str, List[FeedbackResponse]] = {}
        for response in self.response_repository.list_for_trainer(None):
            trainer_id = response.link.booking.trainer_id
            if trainer_id:
                by_trainer.setdefault(trainer_id, []).append(response)

        active_links: Dict[str, int] = {}
        for link in self.link_repository.find_by(is_active=True):
            if link.is_valid(now) and link.booking and link.booking.trainer_id:
                active_links[link.booking.trainer_id] = active_links.get(link.booking.trainer_id, 0) + 1

        trainers = self.trainer_repository.get_by_ids(list(set(by_trainer) | set(active_links)))
        needle = (q or "").strip().lower()
        rows = []
        for trainer in trainers:
            if needle and needle not in trainer.name.lower():
                continue
            rows.append(
                {
                    "trainer_id": trainer.id,
                    "trainer_name": trainer.name,
                    "stats": feedback_stats(by_trainer.get(trainer.id, [])),
                    "active_links": active_links.get(trainer.id, 0),
                }
            )
        rows.sort(key=lambda row: (-row["stats"]["total_responses"], row["trainer_name"]))
        return rows
