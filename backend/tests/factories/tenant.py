"""Factory Boy definitions for tenants and stores."""

from __future__ import annotations

import factory

from pos_backoffice.models import Store, Tenant
from tests.factories import BaseFactory


class TenantFactory(BaseFactory):
    """Build persisted :class:`pos_backoffice.models.Tenant` instances."""

    class Meta:
        model = Tenant

    name = factory.Sequence(lambda n: f"Coffee House {n}")
    slug = factory.Sequence(lambda n: f"coffee-house-{n}")
    is_active = True


class StoreFactory(BaseFactory):
    class Meta:
        model = Store

    tenant_id = factory.LazyFunction(lambda: TenantFactory().id)
    name = factory.Sequence(lambda n: f"Store {n}")
    address = factory.Faker("street_address")
    phone = None
    is_active = True
