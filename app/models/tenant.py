"""Tenant (family) snapshot for multi-tenant isolation."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Tenant:
    """
    Multi-tenant isolation boundary.

    A tenant is a family: a group of users whose records are mutually
    visible, subject to the visibility policy. Tenants are disjoint and
    every user belongs to at most one of them.

    One reserved tenant (the default administrative family, see
    settings.RESERVED_TENANT_ID) can never be deleted.
    """

    id: str
    member_ids: frozenset[str] = field(default_factory=frozenset)

    def __repr__(self) -> str:
        return f"<Tenant(id='{self.id}', members={len(self.member_ids)})>"
