"""
Base schemas with standardized field types for consistent API responses.
"""
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic_core import core_schema

from ..core.timezone_utils import ensure_utc


class StrictRequestModel(BaseModel):
    """Request DTO base that always forbids unexpected fields."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, str_strip_whitespace=True)


class ORMModel(BaseModel):
    """Response DTO base that reads attributes straight off ORM rows."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, populate_by_name=True)


class Money(Decimal):
    """Money field that always serializes as float"""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def validate_money(value: Any) -> Decimal:
            if isinstance(value, (int, float)):
                return cls(str(value))
            if isinstance(value, str):
                return cls(value)
            if isinstance(value, Decimal):
                return value
            raise ValueError(f"Cannot convert {type(value)} to Money")

        return core_schema.no_info_after_validator_function(
            validate_money,
            core_schema.union_schema(
                [
                    core_schema.is_instance_schema(Decimal),
                    core_schema.int_schema(),
                    core_schema.float_schema(),
                    core_schema.str_schema(),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                float,
                info_arg=False,
                return_schema=core_schema.float_schema(),
            ),
        )


class CountResponse(BaseModel):
    count: int


def _as_utc(value: datetime) -> datetime:
    return ensure_utc(value)


# Timestamps read back from some drivers are naive; responses always carry UTC offsets
UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]
