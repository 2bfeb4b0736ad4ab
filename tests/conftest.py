"""
Pytest configuration and fixtures for the sand sample API tests.

Settings come from `config.settings` (see pyproject.toml); pytest-django
gives every `django_db` test a fresh transaction on a throwaway database.
"""
from __future__ import annotations

import io

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from samples.models import SandSample
from samples.sediment import classify

CSV_HEADER = "LAT,LON,Number_of_Grains,D10,D16,D25,D50,D65,D75,D84,D90,Dmean,Dmed"


def csv_row(
    lat="52.1",
    lon="4.3",
    grains="250",
    d50="0.3",
    dmean="0.32",
    dmed="0.3",
    d10="0.12",
    d16="0.15",
    d25="0.2",
    d65="0.36",
    d75="0.4",
    d84="0.46",
    d90="0.5",
) -> str:
    """One CSV data line in CSV_HEADER order; every value is passed as text."""
    return ",".join([lat, lon, grains, d10, d16, d25, d50, d65, d75, d84, d90, dmean, dmed])


def csv_bytes(*rows: str, header: str = CSV_HEADER) -> bytes:
    return ("\n".join([header, *rows]) + "\n").encode("utf-8")


def make_sample(**overrides) -> SandSample:
    values = {
        "latitude": 52.1,
        "longitude": 4.3,
        "number_of_grains": 250,
        "d10": 0.12,
        "d16": 0.15,
        "d25": 0.2,
        "d50": 0.3,
        "d65": 0.36,
        "d75": 0.4,
        "d84": 0.46,
        "d90": 0.5,
        "dmean": 0.32,
        "dmed": 0.3,
    }
    values.update(overrides)
    values["sediment_type"] = classify(values["dmed"])
    return SandSample.objects.create(**values)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def csv_file():
    """Factory for an in-memory CSV stream, as `ingest_csv` receives it."""

    def _build(*rows: str, header: str = CSV_HEADER) -> io.BytesIO:
        return io.BytesIO(csv_bytes(*rows, header=header))

    return _build


@pytest.fixture
def csv_upload():
    """Factory for a multipart file the API client can post."""

    def _build(*rows: str, header: str = CSV_HEADER, name: str = "samples.csv") -> SimpleUploadedFile:
        return SimpleUploadedFile(name, csv_bytes(*rows, header=header), content_type="text/csv")

    return _build
