"""
Bulk member import from spreadsheet rows.

Rows arrive as header -> value mappings (parsed here from an uploaded .csv or
.xlsx file, or posted as JSON by clients that read the spreadsheet
themselves). Each row is reconciled against the existing members by email:

- no email or no full name: skipped
- email already present: full name updated; whatsapp, LinkedIn and role only
  when the row carries a value; stage and résumé untouched
- otherwise: created in the intake stage with default profile values

A failure on one row is counted and does not stop the rest.
"""

import csv
import io
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConfigurationError, ValidationFailed
from app.models.enums import Area, EnglishLevel
from app.repositories.member_repository import MemberRepository
from app.repositories.stage_repository import StageRepository
from app.schemas.member_import import ImportFailure, ImportResult
from app.services.member_service import NO_STAGES_MESSAGE
from app.services.operation import domain_operation
from app.services.view_invalidation import MEMBERS_VIEW, PIPELINE_VIEW, ViewInvalidator

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "Member"

# Spreadsheet headers accepted for each field, in lookup order
COLUMN_ALIASES: Dict[str, Sequence[str]] = {
    "email": ("Email", "Correo", "Mail", "E-mail", "Correo Electrónico"),
    "full_name": ("Full Name", "Nombre", "Nombre Completo", "Name", "Nombres", "Member Name"),
    "whatsapp": ("WhatsApp", "Whatsapp", "Telefono", "Teléfono", "Celular", "Phone", "Mobile"),
    "linkedin_url": (
        "LinkedIn",
        "Linkedin",
        "LinkedIn URL",
        "URL Linkedin",
        "Perfil Linkedin",
        "Linkedin Profile",
    ),
    "role": ("Current Role", "Rol", "Cargo", "Role", "Puesto", "Job Title"),
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def extract_field(row: Mapping[str, Any], aliases: Iterable[str]) -> str:
    """
    Value of the first alias present in the row.

    Exact header match wins; otherwise headers are compared trimmed and
    lowercased. Empty cells count as missing.
    """
    aliases = list(aliases)
    for alias in aliases:
        value = _text(row.get(alias))
        if value:
            return value

    normalized = {_text(key).lower(): value for key, value in row.items() if key is not None}
    for alias in aliases:
        value = _text(normalized.get(alias.lower()))
        if value:
            return value
    return ""


def normalize_row(row: Mapping[str, Any]) -> Dict[str, str]:
    """Map a raw spreadsheet row onto the importable fields."""
    # Rows already keyed by field name (e.g. JSON clients) are accepted too
    return {
        field: extract_field(row, (field, *aliases))
        for field, aliases in COLUMN_ALIASES.items()
    }


def parse_csv_rows(content: bytes) -> List[Dict[str, Any]]:
    """Parse an uploaded CSV (comma or semicolon separated) into header -> value rows."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")

    if not text.strip():
        raise ValidationFailed("The file is empty")

    sample = text[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel

    reader = csv.DictReader(io.StringIO(text), dialect=dialect)
    if not reader.fieldnames:
        raise ValidationFailed("The file has no header row")
    return [dict(row) for row in reader]


def parse_xlsx_rows(content: bytes) -> List[Dict[str, Any]]:
    """Read the first worksheet of an .xlsx workbook into header -> value rows."""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise ValidationFailed("The file is not a valid .xlsx workbook") from exc

    try:
        values = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(values, None)
        headers = [_text(cell) for cell in header or ()]
        if not any(headers):
            raise ValidationFailed("The file has no header row")

        rows = []
        for cells in values:
            if all(_text(cell) == "" for cell in cells):
                continue
            rows.append({name: cell for name, cell in zip(headers, cells) if name})
        return rows
    finally:
        workbook.close()


SPREADSHEET_PARSERS = {
    ".csv": parse_csv_rows,
    ".xlsx": parse_xlsx_rows,
}


def parse_spreadsheet(content: bytes, filename: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Parse an uploaded spreadsheet, choosing the reader by file extension.

    Files without an extension are read as .xlsx when they carry the zip
    signature and as CSV otherwise.
    """
    suffix = Path(filename or "").suffix.lower()
    if not suffix:
        suffix = ".xlsx" if content.startswith(b"PK\x03\x04") else ".csv"

    parser = SPREADSHEET_PARSERS.get(suffix)
    if parser is None:
        raise ValidationFailed(
            "Unsupported file type; upload a .csv or .xlsx file",
            {"filename": filename},
        )
    return parser(content)


class MemberImportService:
    """Reconciles spreadsheet rows with stored members."""

    def __init__(self, db: AsyncSession, views: Optional[ViewInvalidator] = None):
        self.db = db
        self.repository = MemberRepository(db)
        self.stage_repository = StageRepository(db)
        self.views = views

    @domain_operation("Could not process the file")
    async def import_file(self, content: bytes, filename: Optional[str] = None) -> ImportResult:
        rows = parse_spreadsheet(content, filename)
        return await self._import(rows)

    @domain_operation("Could not process the file")
    async def import_rows(self, rows: List[Mapping[str, Any]]) -> ImportResult:
        return await self._import(rows)

    async def _import(self, rows: Sequence[Mapping[str, Any]]) -> ImportResult:
        result = ImportResult(total=len(rows))

        intake = await self.stage_repository.get_intake()
        if intake is None:
            raise ConfigurationError(NO_STAGES_MESSAGE)

        for index, raw in enumerate(rows, start=1):
            fields = normalize_row(raw)
            if not fields["email"] or not fields["full_name"]:
                result.skipped += 1
                continue

            try:
                async with self.db.begin_nested():
                    created = await self._reconcile(fields, intake.id)
            except Exception as exc:
                logger.warning("Import row %d (%s) failed: %s", index, fields["email"], exc)
                result.errors += 1
                result.failures.append(
                    ImportFailure(
                        row=index,
                        email=fields["email"],
                        reason=str(getattr(exc, "orig", None) or exc),
                    )
                )
                continue

            if created:
                result.created += 1
            else:
                result.updated += 1

        await self.db.commit()
        logger.info(
            "Import finished: %d rows, %d created, %d updated, %d skipped, %d errors",
            result.total,
            result.created,
            result.updated,
            result.skipped,
            result.errors,
        )

        if self.views is not None:
            self.views.invalidate(MEMBERS_VIEW, PIPELINE_VIEW)
        return result

    async def _reconcile(self, fields: Dict[str, str], intake_stage_id: str) -> bool:
        """Create or update one member; True when created."""
        existing = await self.repository.get_by_email(fields["email"])

        if existing is not None:
            changes: Dict[str, Any] = {"full_name": fields["full_name"]}
            if fields["whatsapp"]:
                changes["whatsapp"] = fields["whatsapp"]
            if fields["linkedin_url"]:
                changes["linkedin_url"] = fields["linkedin_url"]
            if fields["role"]:
                changes["current_role"] = fields["role"]
            await self.repository.update(existing, changes)
            return False

        await self.repository.create(
            {
                "email": fields["email"],
                "full_name": fields["full_name"],
                "whatsapp": fields["whatsapp"],
                "linkedin_url": fields["linkedin_url"],
                "current_role": fields["role"] or DEFAULT_ROLE,
                "area": Area.OTHER.value,
                "english_level": EnglishLevel.BASIC.value,
                "years_experience": 0,
                "cv_file_url": "",
            },
            intake_stage_id,
        )
        return True
