"""
Test Configuration

Shared fixtures for the extraction engine and API tests.
"""

import pytest

from factfind.schemas.extraction import ExtractionContext, PreviousAnswers
from factfind.services.data_extraction import DataExtractionService
from factfind.services.extractors import build_default_registry


@pytest.fixture
def registry():
    """Default extractor registry."""
    return build_default_registry()


@pytest.fixture
def service():
    """Extraction service over the default tables, visibility filtering on."""
    return DataExtractionService(filter_by_visibility=True)


@pytest.fixture
def make_context():
    """Build an ExtractionContext from keyword overrides."""
    def _make(**kwargs) -> ExtractionContext:
        return ExtractionContext(**kwargs)
    return _make


@pytest.fixture
def answered_everything_but_marital():
    """Previous answers covering every required field except maritalStatus."""
    return PreviousAnswers(
        personal={
            "ukResident": True,
            "hasDependents": False,
            "employmentStatus": "Employed",
            "smokingStatus": "Never smoked",
            "height": "5'8\"",
            "weight": "80kg",
        }
    )
