"""Factory Boy definition for :class:`pos_backoffice.models.User`."""

from __future__ import annotations

import factory

from pos_backoffice.models import User
from pos_backoffice.services._shared.ports import StubPasswordHasher
from tests.factories import BaseFactory
from tests.factories.tenant import TenantFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`pos_backoffice.models.User` instances.

    Notes
    -----
    - ``password`` is hashed with :class:`StubPasswordHasher`; services under
      test must be wired with the same hasher to verify it.
    """

    class Meta:
        model = User
        exclude = ("password",)

    tenant_id = factory.LazyFunction(lambda: TenantFactory().id)
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    is_email_verified = True
    is_active = True

    password = DEFAULT_PASSWORD
    password_hash = factory.LazyAttribute(lambda o: StubPasswordHasher().hash(o.password))
