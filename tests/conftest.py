"""
Pytest configuration and fixtures for the NOKO POS backend.
"""

from decimal import Decimal

from django.core.cache import cache

import pytest
from rest_framework.test import APIClient

from inventory.models import Category, MenuItem


@pytest.fixture(autouse=True)
def clear_cache():
    """Analytics reports are cached; every test starts cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    return APIClient()


@pytest.fixture
def staff_user(db, django_user_model):
    return django_user_model.objects.create_user(
        username="cashier", email="cashier@example.com", password="CashierPass123!"
    )


@pytest.fixture
def authenticated_client(api_client, staff_user):
    """
    Fixture for an API client authenticated as a staff member.
    """
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def coffee(db):
    # Seeded by the default categories migration
    category, _ = Category.objects.get_or_create(name="coffee", defaults={"display_name": "Coffee"})
    return category


@pytest.fixture
def food(db):
    category, _ = Category.objects.get_or_create(name="food", defaults={"display_name": "Food"})
    return category


@pytest.fixture
def menu_item(coffee):
    """Catalog item A priced 45.00"""
    return MenuItem.objects.create(name="Latte", price=Decimal("45.00"), category=coffee)


@pytest.fixture
def croissant(food):
    return MenuItem.objects.create(name="Croissant", price=Decimal("12.50"), category=food)
