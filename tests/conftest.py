from pathlib import Path

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

import config
from db.models import Base
from services.data_manager import DataManager
from services.data_store import DataStore
from services.file_storage import FileStorage
from tests.factories import Session, DataModuleFactory
from tests.presets import build_preset_xml, template_files


@pytest.fixture(autouse=True)
def _temp_dirs(tmp_path, monkeypatch):
    """Point upload and built-in preset roots at a temporary directory."""
    monkeypatch.setattr(config, "TEMP_DIR", tmp_path / "temp")
    monkeypatch.setattr(config, "PRESETS_DIR", tmp_path / "presets")
    (tmp_path / "temp" / "forms").mkdir(parents=True)
    (tmp_path / "presets").mkdir()


@pytest.fixture
def session():
    """A session on a fresh in-memory database, shared with the factories."""
    engine = create_engine("sqlite://", poolclass=StaticPool)

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_conn, _rec):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    Session.remove()
    Session.configure(bind=engine)
    yield Session()
    Session.remove()
    engine.dispose()


@pytest.fixture
def store(session):
    return DataStore(session)


@pytest.fixture
def storage(session):
    return FileStorage(session)


@pytest.fixture
def module(session):
    return DataModuleFactory()


@pytest.fixture
def manager(store, module):
    return DataManager(store, module)


@pytest.fixture
def make_preset(tmp_path):
    """
    Write a complete preset directory and return its path.

    make_preset("name", settings={...}, fields=[...], root=..., skip=[...])
    """
    def _make(name="preset", settings=None, fields=None, root=None, skip=()):
        directory = Path(root or tmp_path / "bundles") / name
        directory.mkdir(parents=True)
        (directory / "preset.xml").write_text(
            build_preset_xml(settings or {}, fields or []), encoding="utf-8")
        for filename, content in template_files(name + ":").items():
            if filename not in skip:
                (directory / filename).write_text(content, encoding="utf-8")
        return directory
    return _make


@pytest.fixture
def store_preset(storage):
    """Save a preset in the content store's preset area."""
    def _store(name, settings=None, fields=None, itemid=0):
        args = (config.PRESET_CONTEXT, config.PRESET_COMPONENT,
                config.PRESET_FILEAREA, itemid, f"/{name}/")
        storage.create_file_from_string(
            *args, "preset.xml", build_preset_xml(settings or {}, fields or []))
        for filename, content in template_files(name + ":").items():
            storage.create_file_from_string(*args, filename, content)
    return _store
