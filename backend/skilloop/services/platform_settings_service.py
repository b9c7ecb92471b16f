# backend/skilloop/services/platform_settings_service.py
"""
Platform-wide business settings (commission, GST, booking limits).

Stored rows override ``PLATFORM_SETTING_DEFAULTS``; a fresh database
behaves exactly like the defaults.
"""

from decimal import Decimal
import logging
from typing import Any, Dict, Mapping

from sqlalchemy.orm import Session

from ..core.constants import PLATFORM_SETTING_DEFAULTS, PLATFORM_SETTING_DESCRIPTIONS
from ..core.exceptions import ValidationException
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

BOOLEAN_SETTINGS = frozenset({"manual_pricing_override"})

SETTING_BOUNDS = {
    "platform_commission": (Decimal("0"), Decimal("50")),
    "gst_rate": (Decimal("0"), Decimal("30")),
    "minimum_booking_amount": (Decimal("0"), None),
    "maximum_booking_hours": (Decimal("1"), Decimal("24")),
    "cancellation_fee": (Decimal("0"), Decimal("100")),
    "platform_fee": (Decimal("0"), None),
    "client_platform_fee_percentage": (Decimal("0"), Decimal("100")),
}


class PlatformSettingsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.settings_repository = RepositoryFactory.create_platform_setting_repository(db)

    def get_all(self) -> Dict[str, Decimal]:
        """Stored values merged over defaults."""
        values = dict(PLATFORM_SETTING_DEFAULTS)
        for row in self.settings_repository.list_all():
            if row.setting_key in values:
                values[row.setting_key] = Decimal(str(row.setting_value))
        return values

    def get(self, key: str) -> Decimal:
        if key not in PLATFORM_SETTING_DEFAULTS:
            raise KeyError(key)
        row = self.settings_repository.get_by_key(key)
        if row is None:
            return PLATFORM_SETTING_DEFAULTS[key]
        return Decimal(str(row.setting_value))

    def as_public_dict(self) -> Dict[str, Any]:
        values: Dict[str, Any] = dict(self.get_all())
        for key in BOOLEAN_SETTINGS:
            values[key] = values[key] == 1
        return values

    @staticmethod
    def _validate(key: str, value: Decimal) -> None:
        low, high = SETTING_BOUNDS.get(key, (None, None))
        if (low is not None and value < low) or (high is not None and value > high):
            raise ValidationException(
                f"{key} must be between {low} and {high if high is not None else 'unbounded'}",
                code="INVALID_SETTING",
                details={"key": key, "value": str(value)},
            )

    @BaseService.measure_operation("update_platform_settings")
    def update(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Upsert each provided key with its description; booleans are stored as 1/0."""
        unknown = sorted(set(changes) - set(PLATFORM_SETTING_DEFAULTS))
        if unknown:
            raise ValidationException(
                "Unknown platform settings", code="UNKNOWN_SETTING", details={"keys": unknown}
            )

        with self.transaction():
            for key, raw in changes.items():
                if raw is None:
                    continue
                if key in BOOLEAN_SETTINGS:
                    value = Decimal("1") if raw else Decimal("0")
                else:
                    value = Decimal(str(raw))
                    self._validate(key, value)
                self.settings_repository.upsert(key, value, PLATFORM_SETTING_DESCRIPTIONS.get(key))

        self.log_operation("update_platform_settings", keys=sorted(k for k, v in changes.items() if v is not None))
        return self.as_public_dict()
