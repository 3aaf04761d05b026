"""
Pytest fixtures for back-office core tests.

Mock participants are generated deterministically so assertions can rely on
exact counts.
"""

from datetime import datetime, timedelta

import pytest

from services.backoffice.helpers.rut import compute_check_digit, format_rut
from services.backoffice.log_config import configure_logging
from services.backoffice.search import RangeFilter, SearchConfig, SelectFilter, TextFilter

NOMBRES = ["Juan", "María", "Pedro", "Camila", "Diego", "Valentina"]
APELLIDOS = ["García", "Pérez", "Soto", "Muñoz", "Rojas"]
ESTADOS = ["activo", "inactivo", "suspendido"]
CONTRATISTAS = ["Constructora Andes", "Minera Norte", "Servicios Sur", "Transportes Lagos"]


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Send warnings and above to stderr so CLI output on stdout stays parseable."""
    configure_logging(log_level="WARNING", log_format="json")


def make_rut(index: int) -> str:
    body = str(10_000_000 + index * 7919)
    return format_rut(body + compute_check_digit(body))


def make_participant(index: int) -> dict:
    return {
        "id": f"p-{index:03d}",
        "nombre": f"{NOMBRES[index % len(NOMBRES)]} {APELLIDOS[index % len(APELLIDOS)]}",
        "rut": make_rut(index),
        "contractor": CONTRATISTAS[index % len(CONTRATISTAS)],
        "estado": ESTADOS[index % len(ESTADOS)],
        "asistencia": (index * 7) % 101,
        "nota": round(1.0 + (index % 61) / 10, 1),
        "fechaRegistro": datetime(2024, 1, 1) + timedelta(days=(index * 37) % 365, hours=index % 24),
    }


@pytest.fixture
def participants():
    """150 mock participants; every 5th is a García, every 3rd is activo."""
    return [make_participant(i) for i in range(150)]


@pytest.fixture
def participant_config():
    return SearchConfig(search_fields=("nombre", "rut", "contractor"))


@pytest.fixture
def participant_filters():
    return [
        SelectFilter(key="estado", label="Estado"),
        SelectFilter(key="contractor", label="Contratista"),
        RangeFilter(key="nota", label="Nota", min=1.0, max=7.0),
        TextFilter(key="nombre", label="Nombre"),
    ]
