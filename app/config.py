# -*- coding: utf-8 -*-
"""
Application configuration.

Deployment-specific values come from the environment (or a project-root
.env file); everything else is a class-level constant on Config.
"""

from pathlib import Path
from dataclasses import dataclass
import os

from dotenv import load_dotenv

# ============================================================================
# Load .env file for local environment configuration
# ============================================================================
load_dotenv()

# ============================================================================
# Read settings from environment variables (from .env or system)
# ============================================================================
# Remote backend (hosted REST tables + auth)
_REMOTE_URL = os.getenv("REMOTE_URL", "http://localhost:54321")
_REMOTE_ANON_KEY = os.getenv("REMOTE_ANON_KEY", "")
_REMOTE_TIMEOUT = int(os.getenv("REMOTE_TIMEOUT", "30"))
_REMOTE_TRUNCATE_RPC = os.getenv("REMOTE_TRUNCATE_RPC", "truncate_table")
_REMOTE_VERIFY_SSL = os.getenv("REMOTE_VERIFY_SSL", "true").lower() in ("1", "true", "yes")

# Natural-language report bridge
_REPORT_BRIDGE_URL = os.getenv("REPORT_BRIDGE_URL", "http://localhost:3000/api/process-report")
_REPORT_BRIDGE_TIMEOUT = int(os.getenv("REPORT_BRIDGE_TIMEOUT", "20"))

# Connectivity probing
_CONNECTIVITY_PROBE_INTERVAL_MS = int(os.getenv("CONNECTIVITY_PROBE_INTERVAL_MS", "15000"))

# Local storage location
_DATA_DIR = os.getenv("FAMILY_REGISTRY_DATA_DIR", None)


@dataclass
class Config:
    """Application configuration."""

    # Application Info
    APP_NAME: str = "Family Registry"
    APP_TITLE: str = "Displaced Families Case Management"
    APP_TITLE_AR: str = "نظام إدارة بيانات العائلات النازحة"
    APP_ID: str = "family_data_cloud"
    VERSION: str = "1.0.0"

    # Remote backend
    REMOTE_URL: str = _REMOTE_URL
    REMOTE_ANON_KEY: str = _REMOTE_ANON_KEY
    REMOTE_TIMEOUT: int = _REMOTE_TIMEOUT
    REMOTE_TRUNCATE_RPC: str = _REMOTE_TRUNCATE_RPC
    REMOTE_VERIFY_SSL: bool = _REMOTE_VERIFY_SSL
    REMOTE_PAGE_SIZE: int = 1000

    # Report bridge
    REPORT_BRIDGE_URL: str = _REPORT_BRIDGE_URL
    REPORT_BRIDGE_TIMEOUT: int = _REPORT_BRIDGE_TIMEOUT

    # Connectivity
    CONNECTIVITY_PROBE_INTERVAL_MS: int = _CONNECTIVITY_PROBE_INTERVAL_MS

    # Business rules
    DELEGATE_MATCH_THRESHOLD: float = 0.65
    NATIONAL_ID_LENGTH: int = 9
    MIN_BIRTH_YEAR: int = 1900
    SYSTEM_EMAIL_DOMAIN: str = "system.local"
    DEFAULT_CAMP_ID: str = "default"
    BACKUP_VERSION: int = 2

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATA_DIR: Path = Path(_DATA_DIR) if _DATA_DIR else PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # Local database (draft store + settings)
    DB_NAME: str = "family_registry.db"
    DB_PATH: Path = DATA_DIR / DB_NAME

    # Logging
    LOG_FILE: str = "app.log"
    LOG_PATH: Path = LOGS_DIR / LOG_FILE
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3

    # Date/Time Formats
    DATE_FORMAT: str = "%Y-%m-%d"
    DATETIME_FORMAT: str = "%Y-%m-%d %H:%M:%S"
    DATE_FORMAT_DISPLAY: str = "%d/%m/%Y"


# Controlled vocabularies
class Vocabularies:
    # Value (code), Name (English), Name (Arabic)
    ROLES = [
        ("husband", "Husband", "زوج"),
        ("wife", "Wife", "زوجة"),
        ("second_wife", "Second wife", "زوجة ثانية"),
        ("widow", "Widow", "أرملة"),
        ("widower", "Widower", "أرمل"),
        ("divorced", "Divorced", "مطلقة"),
        ("abandoned", "Abandoned", "مهجورة"),
        ("guardian", "Guardian", "وصي"),
        ("son", "Son", "ابن"),
        ("daughter", "Daughter", "ابنة"),
        ("other", "Other", "أخرى"),
        ("father", "Father", "أب"),
        ("mother", "Mother", "أم"),
        ("grandfather", "Grandfather", "جد"),
        ("grandmother", "Grandmother", "جدة"),
    ]

    SHELTER_TYPES = [
        ("ready_tent", "Ready-made tent", "خيمة جاهزة"),
        ("manufactured_tent", "Manufactured tent", "خيمة مصنعة"),
        ("house", "House", "بيت"),
        ("other", "Other", "أخرى"),
    ]

    HOUSING_STATUS = [
        ("bad", "Bad", "سيء"),
        ("good", "Good", "جيد"),
        ("excellent", "Excellent", "ممتاز"),
    ]

    GENDERS = [
        ("male", "Male", "ذكر"),
        ("female", "Female", "أنثى"),
    ]
