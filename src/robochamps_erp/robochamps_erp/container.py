from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .combined.service import CombinedRecordService
from .core.constants import DEFAULT_ATTENDANCE_BUCKET, DEFAULT_SHEETS_BUCKET
from .database.connection import DBConfig, DatabaseConnection
from .late_uploads.mysql_late_upload_repository import MySQLLateUploadRequestRepository
from .late_uploads.repository import LateUploadRequestRepository
from .late_uploads.service import LateUploadService
from .meetings.mysql_meeting_repository import MySQLMeetingLinkRepository
from .meetings.repository import MeetingLinkRepository
from .meetings.service import MeetingLinkService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .schools.mysql_school_repository import MySQLSchoolRepository
from .schools.repository import SchoolRepository
from .schools.service import SchoolService
from .sheets.mysql_sheet_repository import MySQLSheetRepository
from .sheets.repository import SheetRepository
from .sheets.service import SheetService
from .storage.blob import BlobStorage, SupabaseBlobStorage
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    schools_repo: SchoolRepository
    attendance_repo: AttendanceRepository
    reports_repo: ReportRepository
    late_requests_repo: LateUploadRequestRepository
    sheets_repo: SheetRepository
    meeting_links_repo: MeetingLinkRepository
    storage: BlobStorage

    auth_service: AuthService
    user_service: UserService
    school_service: SchoolService
    attendance_service: AttendanceService
    report_service: ReportService
    late_upload_service: LateUploadService
    sheet_service: SheetService
    combined_record_service: CombinedRecordService
    meeting_link_service: MeetingLinkService


def wire_services(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    schools_repo: SchoolRepository,
    attendance_repo: AttendanceRepository,
    reports_repo: ReportRepository,
    late_requests_repo: LateUploadRequestRepository,
    sheets_repo: SheetRepository,
    meeting_links_repo: MeetingLinkRepository,
    storage: BlobStorage,
    sheets_bucket: str = DEFAULT_SHEETS_BUCKET,
    attendance_bucket: str = DEFAULT_ATTENDANCE_BUCKET,
    admin_reset_secret: str = "",
) -> Container:
    """Build every service on top of the given repositories (real or fake)."""

    late_upload_service = LateUploadService(late_requests_repo, schools_repo)
    return Container(
        conn=conn,
        users_repo=users_repo,
        schools_repo=schools_repo,
        attendance_repo=attendance_repo,
        reports_repo=reports_repo,
        late_requests_repo=late_requests_repo,
        sheets_repo=sheets_repo,
        meeting_links_repo=meeting_links_repo,
        storage=storage,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, schools_repo, reset_secret=admin_reset_secret),
        school_service=SchoolService(schools_repo, users_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            schools_repo,
            storage,
            bucket=attendance_bucket,
        ),
        report_service=ReportService(reports_repo, users_repo, schools_repo),
        late_upload_service=late_upload_service,
        sheet_service=SheetService(
            sheets_repo,
            schools_repo,
            late_upload_service,
            storage,
            bucket=sheets_bucket,
        ),
        combined_record_service=CombinedRecordService(attendance_repo, reports_repo, users_repo, schools_repo),
        meeting_link_service=MeetingLinkService(meeting_links_repo, schools_repo),
    )


def build_container(
    *,
    db_config: dict,
    supabase_url: str = "",
    supabase_key: str = "",
    sheets_bucket: str = DEFAULT_SHEETS_BUCKET,
    attendance_bucket: str = DEFAULT_ATTENDANCE_BUCKET,
    admin_reset_secret: str = "",
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        schools_repo=MySQLSchoolRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        reports_repo=MySQLReportRepository(conn),
        late_requests_repo=MySQLLateUploadRequestRepository(conn),
        sheets_repo=MySQLSheetRepository(conn),
        meeting_links_repo=MySQLMeetingLinkRepository(conn),
        storage=SupabaseBlobStorage(supabase_url, supabase_key),
        sheets_bucket=sheets_bucket,
        attendance_bucket=attendance_bucket,
        admin_reset_secret=admin_reset_secret,
    )
