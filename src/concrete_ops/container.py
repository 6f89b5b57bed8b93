from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Optional

from .access_requests.mysql_access_request_repository import MySQLAccessRequestRepository
from .access_requests.service import AccessRequestService
from .auth.tokens import TokenSigner
from .common.geo import Geofence, ShopLocation
from .core.constants import DEFAULT_ALLOWED_RADIUS_METERS, DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .documents.mysql_document_repository import MySQLDocumentRepository
from .documents.service import DocumentService
from .equipment.damage_service import DamageReportService
from .equipment.maintenance_service import MaintenanceService
from .equipment.mysql_damage_report_repository import MySQLDamageReportRepository
from .equipment.mysql_equipment_repository import MySQLEquipmentRepository
from .equipment.mysql_maintenance_repository import MySQLMaintenanceRepository
from .equipment.mysql_usage_repository import MySQLEquipmentUsageRepository
from .equipment.service import EquipmentService
from .equipment.usage_service import EquipmentUsageService
from .inventory.mysql_inventory_repository import MySQLInventoryRepository
from .inventory.service import InventoryService
from .jobs.mysql_job_activity_repository import MySQLJobActivityRepository
from .jobs.mysql_job_repository import MySQLJobOrderRepository
from .jobs.mysql_standby_repository import MySQLStandbyRepository
from .jobs.service import JobOrderService
from .jobs.standby_service import StandbyService
from .jobs.workflow_service import JobWorkflowService
from .notifications.emails import EmailNotifier
from .notifications.mailer import Mailer, SMTPSettings
from .notifications.sms import SMSSender
from .timecards.mysql_timecard_repository import MySQLTimecardRepository
from .timecards.service import TimecardService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    """Services the controllers talk to. Tests build one from fake repositories."""

    auth_service: AuthService
    user_service: UserService
    access_request_service: AccessRequestService
    timecard_service: TimecardService
    job_order_service: JobOrderService
    job_workflow_service: JobWorkflowService
    standby_service: StandbyService
    equipment_service: EquipmentService
    maintenance_service: MaintenanceService
    damage_report_service: DamageReportService
    equipment_usage_service: EquipmentUsageService
    inventory_service: InventoryService
    document_service: DocumentService

    conn: Optional[DatabaseConnection] = None


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    access_requests_repo = MySQLAccessRequestRepository(conn)
    timecards_repo = MySQLTimecardRepository(conn)
    jobs_repo = MySQLJobOrderRepository(conn)
    job_activity_repo = MySQLJobActivityRepository(conn)
    standby_repo = MySQLStandbyRepository(conn)
    equipment_repo = MySQLEquipmentRepository(conn)
    maintenance_repo = MySQLMaintenanceRepository(conn)
    damage_reports_repo = MySQLDamageReportRepository(conn)
    usage_repo = MySQLEquipmentUsageRepository(conn)
    inventory_repo = MySQLInventoryRepository(conn)
    documents_repo = MySQLDocumentRepository(conn)

    shop = getattr(settings, "SHOP_LOCATION", {}) or {}
    geofence = Geofence(
        ShopLocation(
            name=str(shop.get("name", "Shop")),
            latitude=float(shop.get("latitude", 0.0)),
            longitude=float(shop.get("longitude", 0.0)),
        ),
        allowed_radius_meters=float(getattr(settings, "ALLOWED_RADIUS_METERS", DEFAULT_ALLOWED_RADIUS_METERS)),
        bypass=bool(getattr(settings, "BYPASS_LOCATION_CHECK", False)),
    )
    tokens = TokenSigner(
        str(getattr(settings, "SECRET_KEY", "dev-secret-key")),
        max_age_seconds=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)),
    )
    company_name = str(getattr(settings, "COMPANY_NAME", "Concrete Ops"))
    notifier = EmailNotifier(
        Mailer(SMTPSettings.from_dict(getattr(settings, "SMTP", {}) or {})),
        company_name=company_name,
        app_url=str(getattr(settings, "APP_URL", "")),
    )
    sms = SMSSender(
        str(getattr(settings, "TELNYX_API_KEY", "") or ""),
        str(getattr(settings, "TELNYX_PHONE_NUMBER", "") or ""),
    )

    job_order_service = JobOrderService(jobs_repo, job_activity_repo, users_repo)

    return Container(
        conn=conn,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo),
        access_request_service=AccessRequestService(access_requests_repo, users_repo, notifier),
        timecard_service=TimecardService(timecards_repo, geofence),
        job_order_service=job_order_service,
        job_workflow_service=JobWorkflowService(jobs_repo, job_activity_repo, job_order_service),
        standby_service=StandbyService(standby_repo, job_order_service),
        equipment_service=EquipmentService(equipment_repo, users_repo),
        maintenance_service=MaintenanceService(maintenance_repo, equipment_repo),
        damage_report_service=DamageReportService(damage_reports_repo, equipment_repo),
        equipment_usage_service=EquipmentUsageService(usage_repo, equipment_repo, job_order_service),
        inventory_service=InventoryService(inventory_repo, equipment_repo, users_repo),
        document_service=DocumentService(
            documents_repo,
            jobs_repo,
            job_order_service,
            users_repo,
            notifier,
            sms,
            company_name=company_name,
        ),
    )
