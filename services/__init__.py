# -*- coding: utf-8 -*-
"""
Family Registry Service Layer
"""

# Lazy imports to avoid circular dependencies
__all__ = [
    "AidService",
    "AuthService",
    "BackupService",
    "BulkImportReconciler",
    "CampService",
    "ConnectivityMonitor",
    "DraftStore",
    "DraftUploader",
    "ExportService",
    "FamilyService",
    "HttpRemoteStore",
    "InMemoryRemoteStore",
    "NationalIdChecker",
    "NotificationService",
    "RemoteApiClient",
    "SmartReportService",
    "SyncPolicy",
]

_LOCATIONS = {
    "AidService": "aid_service",
    "AuthService": "auth_service",
    "BackupService": "backup_service",
    "BulkImportReconciler": "import_service",
    "CampService": "camp_service",
    "ConnectivityMonitor": "connectivity",
    "DraftStore": "draft_store",
    "DraftUploader": "draft_uploader",
    "ExportService": "export_service",
    "FamilyService": "family_service",
    "HttpRemoteStore": "remote_store",
    "InMemoryRemoteStore": "memory_remote_store",
    "NationalIdChecker": "uniqueness_service",
    "NotificationService": "notification_service",
    "RemoteApiClient": "api_client",
    "SmartReportService": "report_service",
    "SyncPolicy": "sync_policy",
}


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    module_name = _LOCATIONS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    import importlib
    module = importlib.import_module(f".{module_name}", __name__)
    return getattr(module, name)
