# -*- coding: utf-8 -*-
"""
Shared fixtures: a throw-away local database, the in-process remote store
and the services wired on top of them.
"""

import pytest
from PyQt5.QtCore import QCoreApplication

from app.context import AppContext
from repositories.database import Database
from repositories.draft_repository import DraftRepository
from repositories.settings_repository import SettingsRepository
from services.camp_service import CampService
from services.connectivity import ConnectivityMonitor
from services.draft_store import DraftStore
from services.draft_uploader import DraftUploader
from services.family_service import FamilyService
from services.memory_remote_store import InMemoryRemoteStore
from services.notification_service import NotificationService
from services.sync_policy import SyncPolicy
from services.translation_manager import set_language
from services.uniqueness_service import NationalIdChecker

CAMP_ID = "camp-1"
OTHER_CAMP_ID = "camp-2"


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """Signals and timers need a QCoreApplication instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture(autouse=True)
def arabic_messages():
    set_language("ar")
    yield
    set_language("ar")


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def settings(db):
    return SettingsRepository(db)


@pytest.fixture
def remote():
    store = InMemoryRemoteStore()
    store.seed("camps", [
        {"camp_id": CAMP_ID, "name": "مخيم الأمل"},
        {"camp_id": OTHER_CAMP_ID, "name": "مخيم النور"},
    ])
    return store


@pytest.fixture
def connectivity():
    return ConnectivityMonitor(online=True)


@pytest.fixture
def notifications(remote):
    return NotificationService(remote)


@pytest.fixture
def family_service(remote, notifications):
    return FamilyService(remote, notifications)


@pytest.fixture
def camp_service(remote, settings, connectivity):
    return CampService(remote, settings, connectivity)


@pytest.fixture
def draft_store(db, settings):
    return DraftStore(DraftRepository(db), settings)


@pytest.fixture
def uploader(draft_store, family_service, connectivity):
    return DraftUploader(draft_store, family_service, connectivity)


@pytest.fixture
def sync_policy(connectivity, family_service, draft_store, uploader):
    return SyncPolicy(connectivity, family_service, draft_store, uploader)


@pytest.fixture
def nid_checker(draft_store, family_service, connectivity):
    return NationalIdChecker(draft_store, family_service, connectivity)


@pytest.fixture
def context(tmp_path, remote, connectivity):
    ctx = AppContext(db_path=tmp_path / "context.db", remote=remote, connectivity=connectivity)
    yield ctx
    ctx.close()


def _member(name, nid, role, dob="1985-03-15", **extra):
    member = {"name": name, "nid": nid, "role": role, "dob": dob}
    member.update(extra)
    return member


@pytest.fixture
def make_form():
    """Factory for a valid family form; keyword arguments override fields."""

    def factory(family_number="101", members=None, **overrides):
        form = {
            "family_number": family_number,
            "address": "مخيم الأمل - بلوك 3",
            "contact": "0599123456",
            "shelter_type": "ready_tent",
            "housing_status": "good",
            "members": members if members is not None else [
                _member("أحمد محمد علي", f"1{family_number:0>8}"[-9:], "husband"),
                _member("فاطمة خالد محمود", f"2{family_number:0>8}"[-9:], "wife", dob="1990-07-20"),
            ],
        }
        form.update(overrides)
        return form

    return factory


@pytest.fixture
def member():
    return _member
