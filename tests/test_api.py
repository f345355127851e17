import io
import zipfile

import pytest

import config
from db import get_engine
from main import create_app
from tests.presets import build_preset_xml, template_files
from tests.factories import Session, DataFieldFactory, DataModuleFactory


@pytest.fixture
def app():
    app = create_app("sqlite://")
    Session.remove()
    Session.configure(bind=get_engine(), expire_on_commit=False)
    yield app
    Session.remove()


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def module(app):
    module = DataModuleFactory()
    Session.commit()
    return module


def _zip(settings, fields, folder=""):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr(folder + "preset.xml", build_preset_xml(settings, fields))
        for filename, content in template_files().items():
            zf.writestr(folder + filename, content)
    return buf.getvalue()


def _upload(client, module, payload):
    return client.post(
        f"/api/v1/data/{module.id}/preset/upload",
        data={"preset_file": (io.BytesIO(payload), "preset.zip")},
        content_type="multipart/form-data",
    )


def test_upload_then_import(client, module):
    payload = _zip({"requiredentries": "3"}, [{"name": "Title", "type": "text"}])
    resp = _upload(client, module, payload)
    assert resp.status_code == 200
    directory = resp.get_json()["directory"]

    resp = client.post(f"/api/v1/data/{module.id}/preset/import?overwrite=1",
                       data={"directory": directory})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["missing_types"] == []
    assert body["created"] == ["Title"]

    fields = client.get(f"/api/v1/data/{module.id}/fields").get_json()["fields"]
    assert [(f["name"], f["type"]) for f in fields] == [("Title", "text")]


def test_zip_with_top_level_folder_is_accepted(client, module):
    payload = _zip({}, [{"name": "Title", "type": "text"}], folder="journal/")
    directory = _upload(client, module, payload).get_json()["directory"]

    resp = client.post(f"/api/v1/data/{module.id}/preset/import",
                       json={"directory": directory})
    assert resp.status_code == 200


def test_upload_rejects_non_zip(client, module):
    resp = _upload(client, module, b"not a zip")
    assert resp.status_code == 400
    assert resp.get_json()["type"] == "CannotImportError"


def test_upload_rejects_oversized_contents(client, module, monkeypatch):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("preset.xml", build_preset_xml({}, []))
        zf.writestr("padding.txt", b"\0" * 200_000)
    payload = buf.getvalue()
    monkeypatch.setattr(config, "MAX_PRESET_UPLOAD", 50_000)
    assert len(payload) < config.MAX_PRESET_UPLOAD

    resp = _upload(client, module, payload)

    assert resp.status_code == 400
    assert resp.get_json()["type"] == "CannotImportError"
    assert list((config.TEMP_DIR / "forms").iterdir()) == []


def test_mapping_preview(client, module):
    DataFieldFactory(module=module, name="Title", type="text")
    Session.commit()
    payload = _zip({}, [{"name": "Title", "type": "text"},
                        {"name": "Score", "type": "number"}])
    directory = _upload(client, module, payload).get_json()["directory"]

    resp = client.post(f"/api/v1/data/{module.id}/preset/mapping",
                       data={"directory": directory})

    body = resp.get_json()
    assert body["needs_mapping"] is True
    assert body["fields_to_create"] == ["Score"]
    assert [f["name"] for f in body["fields_to_update"]] == ["Title"]


def test_not_injective_mapping_is_a_conflict(client, module):
    existing = DataFieldFactory(module=module, name="Existing")
    Session.commit()
    payload = _zip({}, [{"name": "A", "type": "text"}, {"name": "B", "type": "text"}])
    directory = _upload(client, module, payload).get_json()["directory"]

    resp = client.post(f"/api/v1/data/{module.id}/preset/import", data={
        "directory": directory,
        "field_0": str(existing.id),
        "field_1": str(existing.id),
    })

    assert resp.status_code == 409
    assert resp.get_json()["type"] == "NotInjectiveMappingError"
    fields = client.get(f"/api/v1/data/{module.id}/fields").get_json()["fields"]
    assert [f["name"] for f in fields] == ["Existing"]


def test_missing_directory_is_rejected(client, module):
    resp = client.post(f"/api/v1/data/{module.id}/preset/import",
                       data={"directory": "nothere"})
    assert resp.status_code == 400
    assert resp.get_json()["type"] == "CannotImportError"


def test_unknown_user_preset_is_not_found(client, module):
    resp = client.post(f"/api/v1/data/{module.id}/preset/import",
                       data={"fullname": "3/ghost"})
    assert resp.status_code == 404


def test_unknown_module(client, app):
    assert client.get("/api/v1/data/999/fields").status_code == 404
    resp = client.post("/api/v1/data/999/preset/import", data={"directory": "x"})
    assert resp.status_code == 404
