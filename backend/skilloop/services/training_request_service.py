# backend/skilloop/services/training_request_service.py
"""
Training Request Service for the Skilloop Platform

Clients post training requests; approved trainers apply with a proposal;
the client shortlists, selects or rejects applications. Selecting one moves
the request to ``in_progress`` with the chosen trainer recorded.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import (
    ApplicationStatus,
    NotificationType,
    TrainerStatus,
    TrainingRequestStatus,
)
from ..core.exceptions import (
    BusinessRuleException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.profile import Profile
from ..models.trainer import Trainer
from ..models.training_request import TrainingApplication, TrainingRequest
from ..repositories.factory import RepositoryFactory
from ..schemas.training_request import ApplicationCreate, TrainingRequestCreate
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class TrainingRequestService(BaseService):
    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        super().__init__(db)
        self.request_repository = RepositoryFactory.create_training_request_repository(db)
        self.application_repository = RepositoryFactory.create_training_application_repository(db)
        self.notification_service = notification_service or NotificationService(db)

    def get_request(self, request_id: str) -> TrainingRequest:
        request = self.request_repository.get_by_id(request_id)
        if not request:
            raise NotFoundException("Training request not found", code="TRAINING_REQUEST_NOT_FOUND")
        return request

    def _owned_request(self, client: Profile, request_id: str) -> TrainingRequest:
        request = self.get_request(request_id)
        if request.client_id != client.id:
            raise ForbiddenException("This training request is not yours", code="NOT_OWNER")
        return request

    @BaseService.measure_operation("create_training_request")
    def create(self, client: Profile, data: TrainingRequestCreate) -> TrainingRequest:
        fields = data.model_dump()
        fields["target_audience"] = data.target_audience.value
        fields["delivery_mode"] = data.delivery_mode.value
        if data.application_deadline is not None:
            fields["application_deadline"] = ensure_utc(data.application_deadline)

        with self.transaction():
            request = self.request_repository.create(
                client_id=client.id,
                status=TrainingRequestStatus.OPEN.value,
                **fields,
            )
        self.log_operation("create_training_request", request_id=request.id, client_id=client.id)
        return request

    def feed(self, q: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[TrainingRequest]:
        """Open requests whose application deadline has not passed."""
        return self.request_repository.list_open(utc_now(), q=q, limit=limit, offset=offset)

    def list_mine(self, client: Profile) -> List[Dict[str, Any]]:
        requests = self.request_repository.list_for_client(client.id)
        counts = self.application_repository.counts_by_request([r.id for r in requests])
        return [
            {**self._request_fields(r), "application_count": counts.get(r.id, 0)}
            for r in requests
        ]

    @staticmethod
    def _request_fields(request: TrainingRequest) -> Dict[str, Any]:
        return {column.name: getattr(request, column.name) for column in request.__table__.columns}

    @BaseService.measure_operation("close_training_request")
    def close(self, client: Profile, request_id: str) -> TrainingRequest:
        request = self._owned_request(client, request_id)
        with self.transaction():
            request.status = TrainingRequestStatus.CLOSED.value
        return request

    @BaseService.measure_operation("apply_to_training_request")
    def apply(self, trainer: Trainer, request_id: str, data: ApplicationCreate) -> TrainingApplication:
        """
        Submit a trainer's proposal for an open request.

        Raises:
            ForbiddenException: trainer is not approved
            BusinessRuleException: request is no longer open
            ConflictException: trainer already applied
        """
        if trainer.status != TrainerStatus.APPROVED.value:
            raise ForbiddenException(
                "Only approved trainers can apply to training requests", code="TRAINER_NOT_APPROVED"
            )
        request = self.get_request(request_id)
        if request.status != TrainingRequestStatus.OPEN.value:
            raise BusinessRuleException(
                "This training request is no longer accepting applications",
                code="REQUEST_NOT_OPEN",
                details={"status": request.status},
            )
        if self.application_repository.get_for_trainer(request.id, trainer.id):
            raise ConflictException(
                "You have already applied to this training request", code="ALREADY_APPLIED"
            )

        with self.transaction():
            application = self.application_repository.create(
                request_id=request.id,
                trainer_id=trainer.id,
                status=ApplicationStatus.PENDING.value,
                **data.model_dump(),
            )
            self.notification_service.notify(
                request.client_id,
                NotificationType.TRAINING_APPLICATION_RECEIVED,
                "New application",
                f'{trainer.name} applied to "{request.title}".',
                {"request_id": request.id, "application_id": application.id},
            )
        self.log_operation("apply_to_training_request", request_id=request.id, trainer_id=trainer.id)
        return application

    @staticmethod
    def _applicant(trainer: Trainer) -> Dict[str, Any]:
        return {
            "id": trainer.id,
            "name": trainer.name,
            "title": trainer.title,
            "rating": trainer.rating,
            "total_reviews": trainer.total_reviews,
            "experience_years": trainer.experience_years,
        }

    @staticmethod
    def _application_fields(application: TrainingApplication) -> Dict[str, Any]:
        return {
            column.name: getattr(application, column.name)
            for column in application.__table__.columns
        }

    def list_applications(self, client: Profile, request_id: str) -> List[Dict[str, Any]]:
        request = self._owned_request(client, request_id)
        return [
            {**self._application_fields(a), "trainer": self._applicant(a.trainer)}
            for a in self.application_repository.list_for_request(request.id)
        ]

    @BaseService.measure_operation("set_application_status")
    def set_application_status(
        self, client: Profile, application_id: str, status: ApplicationStatus
    ) -> TrainingApplication:
        application = self.application_repository.get_by_id(application_id)
        if not application:
            raise NotFoundException("Application not found", code="APPLICATION_NOT_FOUND")
        request = application.request
        if request.client_id != client.id:
            raise ForbiddenException("This training request is not yours", code="NOT_OWNER")
        if status == ApplicationStatus.SELECTED and not (
            request.status == TrainingRequestStatus.OPEN.value
            or (
                request.status == TrainingRequestStatus.IN_PROGRESS.value
                and request.selected_trainer_id is None
            )
        ):
            raise BusinessRuleException(
                "A trainer can no longer be selected for this training request",
                code="REQUEST_NOT_OPEN",
                details={"status": request.status},
            )

        with self.transaction():
            application.status = status.value
            trainer_user_id = application.trainer.user_id if application.trainer else None
            if status == ApplicationStatus.SELECTED:
                request.selected_trainer_id = application.trainer_id
                request.status = TrainingRequestStatus.IN_PROGRESS.value
                self.notification_service.notify(
                    trainer_user_id,
                    NotificationType.TRAINING_APPLICATION_ACCEPTED,
                    "Application accepted",
                    f'You were selected for "{request.title}".',
                    {"request_id": request.id, "application_id": application.id},
                )
            elif status == ApplicationStatus.REJECTED:
                self.notification_service.notify(
                    trainer_user_id,
                    NotificationType.TRAINING_APPLICATION_REJECTED,
                    "Application not selected",
                    f'Your application for "{request.title}" was not selected.',
                    {"request_id": request.id, "application_id": application.id},
                )

        self.log_operation(
            "set_application_status", application_id=application.id, status=status.value
        )
        return application

    def trainer_applications(self, trainer: Trainer, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            {**self._application_fields(a), "request": self._request_fields(a.request)}
            for a in self.application_repository.list_for_trainer(trainer.id, status=status)
        ]

    def admin_list(self, status: Optional[str] = None) -> List[TrainingRequest]:
        return self.request_repository.list_by_status(status)

    @BaseService.measure_operation("admin_set_request_status")
    def admin_set_status(self, request_id: str, status: TrainingRequestStatus) -> TrainingRequest:
        request = self.get_request(request_id)
        with self.transaction():
            request.status = status.value
        return request
