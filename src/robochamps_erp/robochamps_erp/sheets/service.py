from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..access.context import CallerContext, require_caller, require_role
from ..access.filters import SheetFilters, sheet_scope
from ..common.datetime_utils import now_local
from ..common.validators import FieldErrors
from ..core.constants import ALLOWED_SHEET_CONTENT_TYPES, MAX_SHEET_SIZE_BYTES
from ..core.enums import TRAINER_ROLES
from ..core.exceptions import BusinessRuleViolation, ValidationError
from ..late_uploads.deadline import is_submission_window_open
from ..late_uploads.service import NO_SCHOOL_MESSAGE, LateUploadService, validate_month_year
from ..schools.repository import SchoolRepository
from ..storage.blob import BlobStorage, FileUpload
from .model import NewSheet, UploadedCombinedSheet
from .repository import SheetRepository

logger = logging.getLogger(__name__)


class SheetService:
    """Monthly signed combined-sheet uploads.

    A sheet for a month is accepted while its submission window is open, or
    afterwards when the trainer holds an APPROVED late-upload request for it.
    """

    def __init__(
        self,
        sheets: SheetRepository,
        schools: SchoolRepository,
        late_uploads: LateUploadService,
        storage: BlobStorage,
        *,
        bucket: str,
    ):
        self._sheets = sheets
        self._schools = schools
        self._late_uploads = late_uploads
        self._storage = storage
        self._bucket = bucket

    def upload(
        self,
        *,
        caller: Optional[CallerContext],
        month: Any,
        year: Any,
        upload: Optional[FileUpload],
        now: Optional[datetime] = None,
    ) -> UploadedCombinedSheet:
        caller = require_role(caller, TRAINER_ROLES, "Only trainers can upload combined sheets")
        if caller.school_id is None:
            raise ValidationError(NO_SCHOOL_MESSAGE, {"school": NO_SCHOOL_MESSAGE})

        errors = FieldErrors()
        validate_month_year(month, year, errors)
        if upload is None or not upload.data:
            errors.add("file", "is required")
        elif upload.content_type not in ALLOWED_SHEET_CONTENT_TYPES:
            errors.add("file", "must be a PDF, Excel or image file")
        elif upload.size > MAX_SHEET_SIZE_BYTES:
            errors.add("file", "exceeds the 10MB size limit")
        errors.raise_if_any()

        school = self._schools.get_by_id(caller.school_id)
        if not school:
            raise ValidationError("School not found", {"school": "not found"})

        now = now or now_local()
        year = int(year)
        if not is_submission_window_open(month, now) and not self._late_uploads.has_approved(
            trainer_id=caller.caller_id, month=month, year=year
        ):
            raise BusinessRuleViolation(
                "The upload deadline for this month has passed. Request late upload approval first.",
                "LATE_APPROVAL_REQUIRED",
            )

        millis = int(now.timestamp() * 1000)
        file_name = f"combined-sheet-{caller.caller_id}-{month}-{millis}.{upload.extension}"
        path = f"uploaded-sheets/{caller.caller_id}/{file_name}"
        file_url = self._storage.put(bucket=self._bucket, path=path, upload=upload)

        sheet = self._sheets.insert(
            NewSheet(
                trainer_id=caller.caller_id,
                trainer_name=caller.name,
                trainer_email=caller.email,
                school_id=school.school_id,
                school_name=school.name or "Unknown School",
                month=month,
                year=year,
                file_url=file_url,
                file_name=upload.file_name,
                file_size=upload.size,
                uploaded_at=now,
            )
        )
        logger.info("Sheet %s uploaded by trainer %s for %s", sheet.sheet_id, caller.caller_id, month)
        return sheet

    def list_sheets(
        self,
        *,
        caller: Optional[CallerContext],
        filters: SheetFilters = SheetFilters(),
    ) -> Sequence[UploadedCombinedSheet]:
        caller = require_caller(caller)
        return self._sheets.find(sheet_scope(caller, filters))
