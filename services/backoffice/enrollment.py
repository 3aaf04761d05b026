"""
Bulk enrollment validation for course sessions.

Contractors enroll their workers by uploading a sheet with one participant
per row: name, RUT and contractor. Reading the sheet is the caller's job;
this module receives the already-parsed rows and decides which ones can be
enrolled.

Rules:
- Name, RUT and contractor are required
- The RUT must pass módulo 11 validation
- The accepted rows must fit in the seats left in the session
- Errors are reported per sheet row ("Fila 3: RUT requerido") so the
  contractor can fix the file
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence

from .helpers.name import normalize_name
from .helpers.rut import MSG_REQUIRED as MSG_RUT_REQUIRED
from .helpers.rut import format_rut, validate_rut
from .log_config import get_logger, log_processing_batch

logger = get_logger(__name__)

MSG_NAME_REQUIRED = "Nombre requerido"
MSG_CONTRACTOR_REQUIRED = "Contratista requerido"


class ParticipantStatus(str, Enum):
    INSCRITO = "inscrito"
    APROBADO = "aprobado"
    REPROBADO = "reprobado"


@dataclass
class EnrollmentRow:
    """A participant row as read from the sheet."""
    row_number: int
    nombre: str = ""
    rut: str = ""
    contractor: str = ""


@dataclass(frozen=True)
class EnrollmentData:
    """A participant ready to be enrolled."""
    nombre: str
    rut: str
    contractor: str


@dataclass
class ImportResult:
    """Accepted participants and the errors that block the import."""
    valid: List[EnrollmentData] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def rows_from_sheet(rows: Sequence[Any], has_header: bool = True) -> List[EnrollmentRow]:
    """
    Convert raw sheet rows into EnrollmentRow objects.

    Each row is either a sequence ``[nombre, rut, contractor]`` or a mapping
    with those keys. Row numbers follow the sheet, so with a header the
    first data row is row 2.

    Examples:
        >>> rows_from_sheet([["Nombre", "RUT", "Empresa"], ["Ana", "12345678-5", "Acme"]])
        [EnrollmentRow(row_number=2, nombre='Ana', rut='12345678-5', contractor='Acme')]
    """
    data_rows = rows[1:] if has_header else rows
    first_row_number = 2 if has_header else 1

    parsed = []
    for offset, row in enumerate(data_rows):
        if isinstance(row, Mapping):
            values = [row.get("nombre"), row.get("rut"), row.get("contractor")]
        else:
            values = list(row)[:3]
            values += [None] * (3 - len(values))

        parsed.append(EnrollmentRow(
            row_number=first_row_number + offset,
            nombre=_cell(values[0]),
            rut=_cell(values[1]),
            contractor=_cell(values[2]),
        ))

    return parsed


def row_errors(row: EnrollmentRow) -> List[str]:
    """All validation errors for one row, in display order."""
    errors = []

    if not row.nombre.strip():
        errors.append(MSG_NAME_REQUIRED)

    if not row.rut.strip():
        errors.append(MSG_RUT_REQUIRED)
    else:
        validation = validate_rut(row.rut)
        if not validation.valid:
            errors.append(validation.message)

    if not row.contractor.strip():
        errors.append(MSG_CONTRACTOR_REQUIRED)

    return errors


def validate_enrollment_capacity(current_count: int, new_count: int, capacity: int) -> bool:
    """True if ``new_count`` more participants fit in the session."""
    return current_count + new_count <= capacity


def validate_enrollment_rows(
    rows: Iterable[EnrollmentRow],
    capacity: int,
    current_occupancy: int = 0,
    batch_id: Optional[str] = None,
) -> ImportResult:
    """
    Validate a bulk enrollment sheet against field rules and seat capacity.

    Args:
        rows: Parsed sheet rows
        capacity: Total seats of the session
        current_occupancy: Seats already taken
        batch_id: Identifier used in logs (defaults to a timestamp)

    Returns:
        ImportResult with accepted participants (normalized name, formatted
        RUT) and the per-row and capacity errors. The import should only be
        applied when ``ok`` is True.
    """
    start_time = time.perf_counter()
    result = ImportResult()
    failed = 0

    for row in rows:
        errors = row_errors(row)
        if errors:
            failed += 1
            result.errors.append(f"Fila {row.row_number}: {', '.join(errors)}")
            continue

        result.valid.append(EnrollmentData(
            nombre=normalize_name(row.nombre),
            rut=format_rut(row.rut),
            contractor=row.contractor.strip(),
        ))

    available = capacity - current_occupancy
    if not validate_enrollment_capacity(current_occupancy, len(result.valid), capacity):
        result.errors.append(
            f"La nómina supera la capacidad disponible ({available} lugares disponibles)"
        )
        logger.warning(
            "Enrollment exceeds capacity",
            capacity=capacity,
            current_occupancy=current_occupancy,
            requested=len(result.valid),
        )

    log_processing_batch(
        logger,
        batch_id=batch_id or f"enrollment_{int(time.time())}",
        items_processed=len(result.valid),
        items_failed=failed,
        duration_ms=(time.perf_counter() - start_time) * 1000,
        capacity=capacity,
        current_occupancy=current_occupancy,
    )

    return result


def calculate_participant_status(
    asistencia: float,
    nota: float,
    min_attendance: float = 50.0,
    min_grade: float = 4.0,
) -> ParticipantStatus:
    """
    Final status of a participant from attendance percentage and grade.

    Examples:
        >>> calculate_participant_status(80, 5.5)
        <ParticipantStatus.APROBADO: 'aprobado'>
        >>> calculate_participant_status(40, 6.0)
        <ParticipantStatus.REPROBADO: 'reprobado'>
    """
    if asistencia >= min_attendance and nota >= min_grade:
        return ParticipantStatus.APROBADO
    return ParticipantStatus.REPROBADO
