"""Pytest configuration and shared fixtures."""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    """Create an auth user with a profile and the given roles."""
    from django.contrib.auth import get_user_model

    from ticketing.models import Profile, UserRole

    counter = {"n": 0}

    def factory(*roles: str, email: str | None = None, full_name: str = "Test User"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        user = get_user_model().objects.create_user(username=email, email=email, password="secret123")
        Profile.objects.create(user=user, full_name=full_name)
        for role in roles or ("buyer",):
            UserRole.objects.create(user=user, role=role)
        return user

    return factory


@pytest.fixture
def buyer(make_user):
    return make_user("buyer", full_name="Bea Buyer")


@pytest.fixture
def creator(make_user):
    return make_user("buyer", "creator", full_name="Cass Creator")


@pytest.fixture
def organizer(make_user):
    return make_user("buyer", "organizer", full_name="Olu Organizer")


@pytest.fixture
def make_event(db):
    """Create an event row with price tiers given as (name, price, total)."""
    from ticketing.models import Event, PriceTier

    counter = {"n": 0}

    def factory(
        organizer,
        *,
        title: str | None = None,
        published: bool = True,
        days_ahead: int = 7,
        tiers=(("General", 100_000, 10),),
        **fields,
    ):
        counter["n"] += 1
        title = title or f"Event {counter['n']}"
        event = Event.objects.create(
            organizer=organizer,
            title=title,
            slug=f"event-{counter['n']}",
            event_date=timezone.now() + timedelta(days=days_ahead),
            location="Main Hall",
            is_published=published,
            **fields,
        )
        for name, price, total in tiers:
            PriceTier.objects.create(event=event, name=name, price=price, quantity_total=total)
        return event

    return factory


@pytest.fixture
def as_user(api_client):
    """Authenticate the shared API client as `user`."""

    def login(user) -> APIClient:
        api_client.force_authenticate(user=user)
        return api_client

    return login
