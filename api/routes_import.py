"""
api.routes_import - /api/v1/data/<id>/preset/* endpoints.

Upload a preset zip, preview the field mapping, then import.
Parameters are read from the form, the JSON body or the query string.
"""

from flask import request, jsonify, abort

from api import api_bp
from db import get_session
from preset_engine import PresetImporter, stage_upload
from services.data_manager import DataManager
from services.data_store import DataStore
from services.file_storage import FileStorage
from services.notifier import Notifier


def _params() -> dict:
    params = dict(request.args.items())
    if request.is_json:
        params.update(request.get_json(silent=True) or {})
    else:
        params.update(request.form.items())
    return params


def _manager(session, dataid: int) -> DataManager:
    manager = DataManager.from_id(DataStore(session), dataid)
    if manager is None:
        abort(404)
    return manager


@api_bp.route("/data/<int:dataid>/preset/upload", methods=["POST"])
def api_upload_preset(dataid: int):
    """
    POST /api/v1/data/<id>/preset/upload

    Multipart: field name 'preset_file' (zip).
    Returns the directory name to pass to /preset/mapping and /preset/import.
    """
    session = get_session()
    try:
        _manager(session, dataid)
    finally:
        session.close()

    f = request.files.get("preset_file")
    if not f:
        return jsonify({"error": "no preset_file in upload"}), 400
    content = f.read()
    if not content:
        return jsonify({"error": "empty upload"}), 400
    return jsonify({"directory": stage_upload(content)})


@api_bp.route("/data/<int:dataid>/preset/mapping", methods=["POST"])
def api_preset_mapping(dataid: int):
    """
    POST /api/v1/data/<id>/preset/mapping   (directory=... | fullname=...)

    Read-only preview: which fields would be created, updated or removed.
    """
    session = get_session()
    try:
        manager = _manager(session, dataid)
        importer = PresetImporter.create_from_parameters(
            manager, _params(), storage=FileStorage(session),
        )
        return jsonify(importer.get_mapping_information())
    finally:
        session.close()


@api_bp.route("/data/<int:dataid>/preset/import", methods=["POST"])
def api_import_preset(dataid: int):
    """
    POST /api/v1/data/<id>/preset/import?overwrite=0|1

    directory=... | fullname=...   preset to apply
    field_<n>=<fieldid>            map imported field n onto an existing field
    """
    params = _params()
    overwrite = str(params.get("overwrite", "0")) == "1"

    session = get_session()
    try:
        manager = _manager(session, dataid)
        importer = PresetImporter.create_from_parameters(
            manager, params, storage=FileStorage(session), notifier=Notifier(),
        )
        result = importer.finish_import_process(overwrite, manager.get_instance())
        session.commit()
        return jsonify(result.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
