"""
Pytest configuration and shared fixtures.

Unit tests run handlers against the in-memory port implementations
below. Every store call yields to the event loop once, so handlers
driven concurrently through ``asyncio.gather`` really interleave.
"""

import asyncio
import hashlib
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from accounts.domain.user import Profile, User, UserAccount
from accounts.infrastructure.security import JWTTokenSigner
from accounts.ports.account_repository import AccountRepository
from accounts.ports.mailer import Mailer
from accounts.ports.security import PasswordHasher
from accounts.ports.verification_token_repository import VerificationTokenRepository
from core.domain.events import EventHandler
from core.domain.exceptions import (
    DuplicateEmailError,
    LicenseKeyCollisionError,
    ServiceUnavailableError,
)
from core.domain.value_objects import DurationType, Email, Role
from core.infrastructure.event_handlers import ACCOUNT_EVENTS, LICENSE_EVENTS
from core.infrastructure.events import event_bus
from licenses.domain.license import License, LicenseDetails, LicenseSummary
from licenses.ports.license_repository import LicenseRepository
from products.domain.product import (
    CatalogEntry,
    PricingTier,
    Product,
    PurchaseStatus,
    SalesSummary,
)
from products.ports.product_repository import ProductRepository
from products.ports.purchase_repository import PurchaseRepository

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
STRONG_PASSWORD = "Sup3r-Secret-Pass"


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FakePasswordHasher(PasswordHasher):
    """Unsalted SHA-256; counts how often a hash was computed."""

    def __init__(self):
        self.burned = 0

    def hash(self, raw_password: str) -> str:
        return "sha256$" + hashlib.sha256(raw_password.encode()).hexdigest()

    def verify(self, raw_password: str, password_hash: str) -> bool:
        return self.hash(raw_password) == password_hash

    def burn(self, raw_password: str) -> None:
        self.burned += 1
        self.hash(raw_password)


class FakeMailer(Mailer):
    """Records sent mail; raises ServiceUnavailableError while ``failing``."""

    def __init__(self):
        self.sent = []
        self.failing = False

    async def send(self, to, kind, params):
        await asyncio.sleep(0)
        if self.failing:
            raise ServiceUnavailableError("SMTP relay unreachable")
        self.sent.append({"to": to, "kind": kind, "params": dict(params)})

    def last_token(self) -> str:
        """Extract the raw token from the link of the last mail."""
        return self.sent[-1]["params"]["link"].split("token=", 1)[1]


class InMemoryAccountRepository(AccountRepository, VerificationTokenRepository):
    """Users, profiles, roles and verification tokens kept in dictionaries."""

    def __init__(self):
        self.users = {}
        self.profiles = {}
        self.roles = {}
        self.confirmation_tokens = {}
        self.reset_tokens = {}

    async def find_by_email(self, email):
        await asyncio.sleep(0)
        return next((u for u in self.users.values() if u.email == email), None)

    async def find_by_id(self, user_id):
        await asyncio.sleep(0)
        return self.users.get(user_id)

    async def get_profile(self, user_id):
        await asyncio.sleep(0)
        return self.profiles.get(user_id)

    async def get_roles(self, user_id):
        await asyncio.sleep(0)
        return frozenset(self.roles.get(user_id, set()))

    async def has_role(self, user_id, role):
        await asyncio.sleep(0)
        return role in self.roles.get(user_id, set())

    async def create_account(self, user, profile, roles, confirmation_token):
        await asyncio.sleep(0)
        if any(u.email == user.email for u in self.users.values()):
            raise DuplicateEmailError()
        self.users[user.id] = user
        self.profiles[user.id] = profile
        self.roles[user.id] = set(roles)
        self.confirmation_tokens[confirmation_token.id] = confirmation_token
        return user

    async def confirm_email(self, token_id, user_id):
        await asyncio.sleep(0)
        token = self.confirmation_tokens.get(token_id)
        if token is None or token.user_id != user_id:
            return False
        del self.confirmation_tokens[token_id]
        self.users[user_id] = replace(self.users[user_id], email_confirmed=True)
        return True

    async def reset_password(self, token_id, user_id, password_hash):
        await asyncio.sleep(0)
        token = self.reset_tokens.get(token_id)
        if token is None or token.user_id != user_id or token.used:
            return False
        self.reset_tokens[token_id] = token.mark_used()
        self.users[user_id] = replace(self.users[user_id], password_hash=password_hash)
        return True

    async def update_password(self, user_id, password_hash):
        await asyncio.sleep(0)
        self.users[user_id] = replace(self.users[user_id], password_hash=password_hash)

    async def grant_role(self, user_id, role):
        await asyncio.sleep(0)
        roles = self.roles.setdefault(user_id, set())
        if role in roles:
            return False
        roles.add(role)
        return True

    async def revoke_role(self, user_id, role):
        await asyncio.sleep(0)
        roles = self.roles.setdefault(user_id, set())
        if role not in roles:
            return False
        roles.remove(role)
        return True

    async def list_accounts(self):
        await asyncio.sleep(0)
        users = sorted(self.users.values(), key=lambda u: u.created_at, reverse=True)
        return [
            UserAccount(user=u, profile=self.profiles.get(u.id), roles=frozenset(self.roles.get(u.id, set())))
            for u in users
        ]

    async def count_users(self):
        await asyncio.sleep(0)
        return len(self.users)

    async def replace_confirmation_token(self, token):
        await asyncio.sleep(0)
        self.confirmation_tokens = {
            k: t for k, t in self.confirmation_tokens.items() if t.user_id != token.user_id
        }
        self.confirmation_tokens[token.id] = token

    async def find_confirmation_token(self, token_hash):
        await asyncio.sleep(0)
        return next(
            (t for t in self.confirmation_tokens.values() if t.token_hash == token_hash), None
        )

    async def replace_reset_token(self, token):
        await asyncio.sleep(0)
        self.reset_tokens = {k: t for k, t in self.reset_tokens.items() if t.user_id != token.user_id}
        self.reset_tokens[token.id] = token

    async def find_reset_token(self, token_hash):
        await asyncio.sleep(0)
        return next((t for t in self.reset_tokens.values() if t.token_hash == token_hash), None)

    def add_user(self, email, password_hash, confirmed=True, roles=(Role.USER,), created_at=NOW):
        """Insert a user directly, bypassing registration."""
        user = replace(User.create(Email(email), password_hash, created_at), email_confirmed=confirmed)
        self.users[user.id] = user
        self.profiles[user.id] = Profile.for_user(user)
        self.roles[user.id] = set(roles)
        return user


class InMemoryLicenseRepository(LicenseRepository):
    """Licenses in a dictionary; ``claim`` is a compare-and-set."""

    def __init__(self):
        self.licenses = {}

    async def add(self, license):
        await asyncio.sleep(0)
        if any(l.license_key == license.license_key for l in self.licenses.values()):
            raise LicenseKeyCollisionError(license.license_key)
        self.licenses[license.id] = license
        return license

    async def find_by_id(self, license_id):
        await asyncio.sleep(0)
        return self.licenses.get(license_id)

    async def find_by_key(self, license_key):
        await asyncio.sleep(0)
        return next((l for l in self.licenses.values() if l.license_key == license_key), None)

    async def claim(self, license_id, owner_id, activated_at):
        await asyncio.sleep(0)
        license = self.licenses.get(license_id)
        if license is None or license.owner_id is not None or not license.is_active:
            return False
        self.licenses[license_id] = replace(license, owner_id=owner_id, activated_at=activated_at)
        return True

    async def set_hwid(self, license_id, owner_id, hwid):
        await asyncio.sleep(0)
        license = self.licenses.get(license_id)
        if license is None or license.owner_id != owner_id:
            return False
        self.licenses[license_id] = replace(license, hwid=hwid)
        return True

    async def update_fields(self, license_id, changes):
        await asyncio.sleep(0)
        license = self.licenses.get(license_id)
        if license is None:
            return False
        self.licenses[license_id] = replace(license, **changes)
        return True

    async def release(self, license_id):
        await asyncio.sleep(0)
        license = self.licenses.get(license_id)
        if license is None:
            return False
        self.licenses[license_id] = replace(license, owner_id=None, activated_at=None, hwid=None)
        return True

    async def delete(self, license_id):
        await asyncio.sleep(0)
        return self.licenses.pop(license_id, None) is not None

    async def list_for_owner(self, owner_id):
        await asyncio.sleep(0)
        owned = [l for l in self.licenses.values() if l.owner_id == owner_id]
        return [LicenseDetails(license=l) for l in sorted(owned, key=lambda l: l.created_at, reverse=True)]

    async def list_all(self):
        await asyncio.sleep(0)
        ordered = sorted(self.licenses.values(), key=lambda l: l.created_at, reverse=True)
        return [LicenseDetails(license=l) for l in ordered]

    async def count_summary(self):
        await asyncio.sleep(0)
        return LicenseSummary(
            total=len(self.licenses),
            active=sum(1 for l in self.licenses.values() if l.is_active),
        )


class InMemoryProductRepository(ProductRepository):
    """Catalog entries in a list."""

    def __init__(self):
        self.entries = []

    async def find_by_id(self, product_id):
        await asyncio.sleep(0)
        return next((e.product for e in self.entries if e.product.id == product_id), None)

    async def find_by_slug(self, slug):
        await asyncio.sleep(0)
        return next((e for e in self.entries if e.product.slug == slug), None)

    async def list_catalog(self, beta_last=False):
        await asyncio.sleep(0)
        if beta_last:
            return sorted(self.entries, key=lambda e: e.product.is_beta)
        return list(self.entries)

    async def find_tier(self, tier_id):
        await asyncio.sleep(0)
        for entry in self.entries:
            for tier in entry.pricing_tiers:
                if tier.id == tier_id:
                    return tier
        return None

    def add_product(self, slug, name, is_beta=False, prices=None):
        """Insert a product with week/month/lifetime tiers."""
        product = Product(id=uuid.uuid4(), slug=slug, name=name, is_beta=is_beta, created_at=NOW)
        prices = prices or {
            DurationType.WEEK: Decimal("199.00"),
            DurationType.MONTH: Decimal("499.00"),
            DurationType.LIFETIME: Decimal("2499.00"),
        }
        tiers = [
            PricingTier(
                id=uuid.uuid4(),
                product_id=product.id,
                duration_type=duration_type,
                price=price,
                duration_days=duration_type.default_days,
            )
            for duration_type, price in prices.items()
        ]
        self.entries.append(CatalogEntry(product=product, pricing_tiers=tiers))
        return product


class InMemoryPurchaseRepository(PurchaseRepository):
    """Purchases in a list."""

    def __init__(self):
        self.purchases = []

    async def list_for_user(self, user_id):
        await asyncio.sleep(0)
        return [p for p in self.purchases if p.purchase.user_id == user_id]

    async def completed_summary(self):
        await asyncio.sleep(0)
        completed = [p.purchase for p in self.purchases if p.purchase.status is PurchaseStatus.COMPLETED]
        return SalesSummary(purchases=len(completed), revenue=sum((p.amount for p in completed), Decimal("0")))


class SequenceKeyGenerator:
    """Key generator that hands out predefined keys in order."""

    def __init__(self, *keys):
        self.keys = list(keys)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return self.keys.pop(0)


class RecordingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)

    def types(self):
        return [type(e).__name__ for e in self.events]


@pytest.fixture
def clock():
    """Fixture for a clock frozen at NOW."""
    return FrozenClock()


@pytest.fixture
def account_repository():
    """Fixture for the in-memory account and token store."""
    return InMemoryAccountRepository()


@pytest.fixture
def license_repository():
    """Fixture for the in-memory license store."""
    return InMemoryLicenseRepository()


@pytest.fixture
def product_repository():
    """Fixture for the in-memory catalog."""
    return InMemoryProductRepository()


@pytest.fixture
def purchase_repository():
    """Fixture for the in-memory purchase store."""
    return InMemoryPurchaseRepository()


@pytest.fixture
def password_hasher():
    return FakePasswordHasher()


@pytest.fixture
def token_signer():
    """Fixture for a real JWT signer with a test secret."""
    return JWTTokenSigner(secret="unit-test-secret")


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def recorded_events():
    """Record every account and license event published during the test."""
    handler = RecordingHandler()
    for event_type in ACCOUNT_EVENTS + LICENSE_EVENTS:
        event_bus.subscribe(event_type, handler)
    yield handler
    for event_type in ACCOUNT_EVENTS + LICENSE_EVENTS:
        event_bus.unsubscribe(event_type, handler)


@pytest.fixture
def confirmed_user(account_repository, password_hasher):
    """Fixture for a confirmed user with the ``user`` role."""
    return account_repository.add_user("alice@example.com", password_hasher.hash(STRONG_PASSWORD))


@pytest.fixture
def other_user(account_repository, password_hasher):
    """Fixture for a second confirmed user."""
    return account_repository.add_user("bob@example.com", password_hasher.hash(STRONG_PASSWORD))


@pytest.fixture
def admin_user(account_repository, password_hasher):
    """Fixture for a confirmed administrator."""
    return account_repository.add_user(
        "admin@example.com",
        password_hasher.hash(STRONG_PASSWORD),
        roles=(Role.USER, Role.ADMIN),
    )


@pytest.fixture
def make_license(license_repository):
    """Factory fixture inserting licenses straight into the in-memory store."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "license_key": f"TEST-{counter['n']:04d}-ABCD-EFGH",
            "now": NOW - timedelta(days=1),
            "duration_type": DurationType.MONTH,
            "expires_at": NOW + timedelta(days=29),
        }
        is_active = overrides.pop("is_active", True)
        fields.update(overrides)
        license = License.create(**fields)
        if not is_active:
            license = replace(license, is_active=False)
        license_repository.licenses[license.id] = license
        return license

    return _make


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def create_account(db):
    """Factory fixture persisting an account through the ORM."""
    from django.contrib.auth.hashers import make_password

    from accounts.infrastructure.models import Profile as ProfileModel
    from accounts.infrastructure.models import User as UserModel
    from accounts.infrastructure.models import UserRole as UserRoleModel

    def _create(email="alice@example.com", password=STRONG_PASSWORD, confirmed=True, admin=False):
        user = UserModel.objects.create(
            email=email, password_hash=make_password(password), email_confirmed=confirmed
        )
        ProfileModel.objects.create(user=user, display_name=email.split("@")[0])
        UserRoleModel.objects.create(user=user, role=Role.USER.value)
        if admin:
            UserRoleModel.objects.create(user=user, role=Role.ADMIN.value)
        return user

    return _create


@pytest.fixture
def authenticate(api_client):
    """Attach a freshly signed bearer token for ``user`` to the API client."""

    def _authenticate(user):
        token = JWTTokenSigner.from_settings().issue(user.id)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return api_client

    return _authenticate


@pytest.fixture
def create_product(db):
    """Factory fixture persisting a product with week/month/lifetime tiers."""
    from products.infrastructure.models import PricingTier as PricingTierModel
    from products.infrastructure.models import Product as ProductModel

    def _create(slug="nexus", name="Nexus", is_beta=False, base=Decimal("199.00")):
        product = ProductModel.objects.create(slug=slug, name=name, is_beta=is_beta, features=["ESP"])
        PricingTierModel.objects.create(product=product, duration_type="week", price=base, duration_days=7)
        PricingTierModel.objects.create(
            product=product, duration_type="month", price=base + Decimal("300.00"), duration_days=30
        )
        PricingTierModel.objects.create(product=product, duration_type="lifetime", price=base + Decimal("2300.00"))
        return product

    return _create
