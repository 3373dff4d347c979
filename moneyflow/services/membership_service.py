from __future__ import annotations

from uuid import UUID

from moneyflow.models.organization import OrganizationMember


def is_organization_member(organization_id: UUID, user_id: UUID) -> bool:
    member = OrganizationMember.query.filter_by(
        organization_id=organization_id,
        user_id=user_id,
    ).first()
    return member is not None
