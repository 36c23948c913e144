"""Shared pytest fixtures for routewire tests."""

import pytest

from routewire.locator import ServiceRegistry
from routewire.signature import CallableInspector
from tests.mocks import FakeRequest, FakeResponse


@pytest.fixture()
def registry() -> ServiceRegistry:
    """Empty service registry."""
    return ServiceRegistry()


@pytest.fixture()
def inspector() -> CallableInspector:
    """Fresh callable inspector."""
    return CallableInspector()


@pytest.fixture()
def request_double() -> FakeRequest:
    """PATCH request carrying a user update body and two attributes."""
    return FakeRequest(
        method="PATCH",
        body={
            "name": "Alex",
            "email": "email@email.com",
            "date": "21 august 1970",
            "phoneType": "3",
            "isActive": "1",
        },
        attributes={"test": "someValue", "__route__": "route"},
    )


@pytest.fixture()
def response_double() -> FakeResponse:
    """Empty response."""
    return FakeResponse()
