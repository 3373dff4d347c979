"""Request/response shapes for financial goals.

Attribute names follow the storage model (``name``, ``category``); the
``data_key`` of each field is the public API name (``title``, ``type``).
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from moneyflow.models.goal import GOAL_PRIORITIES, GOAL_STATUSES
from moneyflow.schemas.sanitization import sanitize_string_fields

_TEXT_FIELDS = {"title", "type", "description", "priority"}
# Largest value a Numeric(15, 2) column holds.
MAX_MONEY_AMOUNT = Decimal("9999999999999.99")


class GoalCreateSchema(Schema):
    class Meta:
        name = "GoalCreate"
        unknown = EXCLUDE

    organization_id = fields.UUID(required=True)
    name = fields.Str(
        data_key="title",
        required=True,
        validate=validate.Length(min=1, max=255),
    )
    category = fields.Str(
        data_key="type",
        allow_none=True,
        validate=validate.Length(max=64),
    )
    category_id = fields.UUID(allow_none=True)
    description = fields.Str(allow_none=True, validate=validate.Length(max=2000))
    target_amount = fields.Decimal(
        as_string=True,
        places=2,
        required=True,
        validate=validate.Range(min=Decimal("0.01"), max=MAX_MONEY_AMOUNT),
    )
    current_amount = fields.Decimal(
        as_string=True,
        places=2,
        load_default=Decimal("0.00"),
        validate=validate.Range(min=Decimal("0"), max=MAX_MONEY_AMOUNT),
    )
    priority = fields.Str(
        load_default="medium",
        validate=validate.OneOf(GOAL_PRIORITIES),
    )
    target_date = fields.Date(allow_none=True)

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        sanitized = sanitize_string_fields(data, _TEXT_FIELDS)
        if isinstance(sanitized, dict):
            if isinstance(sanitized.get("priority"), str):
                sanitized["priority"] = str(sanitized["priority"]).lower()
            if sanitized.get("type") == "":
                sanitized["type"] = None
        return sanitized


class GoalUpdateSchema(GoalCreateSchema):
    class Meta:
        name = "GoalUpdate"
        unknown = EXCLUDE
        exclude = ("organization_id",)

    current_amount = fields.Decimal(
        as_string=True,
        places=2,
        validate=validate.Range(min=Decimal("0"), max=MAX_MONEY_AMOUNT),
    )
    priority = fields.Str(validate=validate.OneOf(GOAL_PRIORITIES))


class GoalResponseSchema(Schema):
    class Meta:
        name = "Goal"

    id = fields.UUID()
    organization_id = fields.UUID()
    name = fields.Str(data_key="title")
    category = fields.Str(data_key="type", allow_none=True)
    category_id = fields.UUID(allow_none=True)
    description = fields.Str(allow_none=True)
    target_amount = fields.Decimal(as_string=True, places=2)
    current_amount = fields.Decimal(as_string=True, places=2)
    achievement_rate = fields.Decimal(as_string=True, places=2)
    target_date = fields.Date(allow_none=True)
    priority = fields.Str(validate=validate.OneOf(GOAL_PRIORITIES))
    status = fields.Str(validate=validate.OneOf(GOAL_STATUSES))
    created_by = fields.UUID(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class GoalStatsSchema(Schema):
    class Meta:
        name = "GoalStats"

    total_goals = fields.Int()
    active_goals = fields.Int()
    completed_goals = fields.Int()
    average_achievement = fields.Decimal(as_string=True, places=1)
