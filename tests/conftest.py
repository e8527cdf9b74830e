"""Pytest configuration and shared fixtures."""
import django
from django.conf import settings

import pytest


def pytest_configure():
    if not settings.configured:
        settings.configure(
            SECRET_KEY='discrepancies-tests',
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'rest_framework',
                'discrepancies',
            ],
            ROOT_URLCONF='discrepancies.urls',
            DATABASES={},
            USE_TZ=True,
        )
    django.setup()


@pytest.fixture
def contract_text() -> str:
    """A small contract with values in every category."""
    return (
        "Agreement between Acme Corp and Jon Smith, effective 03/15/2024.\n"
        "The purchase price is $100,000.00 payable by March 31, 2024.\n"
        "Interest accrues at 4.5% under the ISDA schedule."
    )


@pytest.fixture
def amended_text() -> str:
    """The same contract with transcription drift."""
    return (
        "Agreement between Acme Corp and John Smith, effective 2024-03-15.\n"
        "The purchase price is $100,500.00 payable by March 31, 2024.\n"
        "Interest accrues at 4.6% under the ISDA schedule."
    )
