"""Test factories for creating test data."""

from tests.factories.contacts import ContactFactory, GroupFactory

__all__ = [
    "ContactFactory",
    "GroupFactory",
]
