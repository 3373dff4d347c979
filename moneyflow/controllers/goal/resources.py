# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any
from uuid import UUID

from flask import request
from flask_apispec import doc
from flask_apispec.views import MethodResource
from flask_jwt_extended import get_jwt_identity, jwt_required

from moneyflow.application.services.goal_application_service import (
    GoalApplicationError,
)
from moneyflow.exceptions import UnauthorizedAPIError, ValidationAPIError

from .contracts import compat_success, goal_application_error_response
from .dependencies import get_goal_dependencies

_ORGANIZATION_QUERY_PARAM = {
    "organizationId": {"in": "query", "type": "string", "required": True},
}
_GOAL_PATH_PARAM = {"goal_id": {"in": "path", "type": "string", "required": True}}


def _current_user_id() -> UUID:
    try:
        return UUID(str(get_jwt_identity()))
    except ValueError as exc:
        raise UnauthorizedAPIError("Invalid token subject") from exc


def _parse_goal_id(raw: Any) -> UUID:
    try:
        return UUID(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationAPIError("Valid goal ID is required") from exc


def _json_payload() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return {}
    return payload


def _organization_id_arg() -> str | None:
    return request.args.get("organizationId") or request.args.get("organization_id")


def _service() -> Any:
    dependencies = get_goal_dependencies()
    return dependencies.goal_application_service_factory(_current_user_id())


def _updated_response(goal_data: dict[str, Any]) -> Any:
    return compat_success(
        legacy_payload={"message": "Goal updated successfully", "goal": goal_data},
        status_code=200,
        message="Goal updated successfully",
        data={"goal": goal_data},
    )


def _deleted_response() -> Any:
    return compat_success(
        legacy_payload={"message": "Goal deleted successfully"},
        status_code=200,
        message="Goal deleted successfully",
        data={},
    )


class GoalCollectionResource(MethodResource):
    @doc(
        description=(
            "Lists the organization's goals. Progress is synchronized with the "
            "transaction ledger before the list is returned."
        ),
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=_ORGANIZATION_QUERY_PARAM,
        responses={
            200: {"description": "Goal list"},
            400: {"description": "Missing or malformed organization ID"},
            401: {"description": "Invalid token"},
            403: {"description": "Not a member of the organization"},
        },
    )
    @jwt_required()
    def get(self) -> Any:
        service = _service()
        try:
            goals = service.list_goals(_organization_id_arg())
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)

        return compat_success(
            legacy_payload={"goals": goals},
            status_code=200,
            message="Goals listed successfully",
            data={"goals": goals},
            meta={"total": len(goals)},
        )

    @doc(
        description="Creates a financial goal for an organization.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        responses={
            201: {"description": "Goal created"},
            400: {"description": "Invalid data"},
            401: {"description": "Invalid token"},
            403: {"description": "Not a member of the organization"},
        },
    )
    @jwt_required()
    def post(self) -> Any:
        payload = _json_payload()
        service = _service()
        try:
            goal_data = service.create_goal(payload)
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)

        return compat_success(
            legacy_payload={"message": "Goal created successfully", "goal": goal_data},
            status_code=201,
            message="Goal created successfully",
            data={"goal": goal_data},
        )

    @doc(
        description="Updates the goal identified by the `id` body field.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        responses={
            200: {"description": "Goal updated"},
            400: {"description": "Invalid data"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found or access denied"},
        },
    )
    @jwt_required()
    def put(self) -> Any:
        payload = _json_payload()
        goal_id = _parse_goal_id(payload.get("id"))
        service = _service()
        try:
            goal_data = service.update_goal(goal_id, payload)
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)
        return _updated_response(goal_data)

    @doc(
        description="Deletes the goal identified by the `id` query parameter.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params={"id": {"in": "query", "type": "string", "required": True}},
        responses={
            200: {"description": "Goal deleted"},
            400: {"description": "Missing or malformed goal ID"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found or access denied"},
        },
    )
    @jwt_required()
    def delete(self) -> Any:
        goal_id = _parse_goal_id(request.args.get("id"))
        service = _service()
        try:
            service.delete_goal(goal_id)
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)
        return _deleted_response()


class GoalStatsResource(MethodResource):
    @doc(
        description="Aggregated goal progress for an organization.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=_ORGANIZATION_QUERY_PARAM,
        responses={
            200: {"description": "Goal statistics"},
            400: {"description": "Missing or malformed organization ID"},
            401: {"description": "Invalid token"},
            403: {"description": "Not a member of the organization"},
        },
    )
    @jwt_required()
    def get(self) -> Any:
        service = _service()
        try:
            stats = service.goal_stats(_organization_id_arg())
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)

        return compat_success(
            legacy_payload={"stats": stats},
            status_code=200,
            message="Goal statistics computed successfully",
            data={"stats": stats},
        )


class GoalResource(MethodResource):
    @doc(
        description="Returns a single goal with synchronized progress.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=_GOAL_PATH_PARAM,
        responses={
            200: {"description": "Goal found"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found or access denied"},
        },
    )
    @jwt_required()
    def get(self, goal_id: UUID) -> Any:
        service = _service()
        try:
            goal_data = service.get_goal(goal_id)
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)

        return compat_success(
            legacy_payload={"goal": goal_data},
            status_code=200,
            message="Goal retrieved successfully",
            data={"goal": goal_data},
        )

    @doc(
        description="Updates a goal and re-synchronizes its progress.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=_GOAL_PATH_PARAM,
        responses={
            200: {"description": "Goal updated"},
            400: {"description": "Invalid data"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found or access denied"},
        },
    )
    @jwt_required()
    def put(self, goal_id: UUID) -> Any:
        payload = _json_payload()
        service = _service()
        try:
            goal_data = service.update_goal(goal_id, payload)
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)
        return _updated_response(goal_data)

    @doc(
        description="Deletes a goal.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=_GOAL_PATH_PARAM,
        responses={
            200: {"description": "Goal deleted"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found or access denied"},
        },
    )
    @jwt_required()
    def delete(self, goal_id: UUID) -> Any:
        service = _service()
        try:
            service.delete_goal(goal_id)
        except GoalApplicationError as exc:
            return goal_application_error_response(exc)
        return _deleted_response()
