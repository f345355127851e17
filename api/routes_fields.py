"""
api.routes_fields - /api/v1/data/<id>/fields endpoint.
"""

from flask import jsonify, abort

from api import api_bp
from db import get_session
from services.data_store import DataStore


@api_bp.route("/data/<int:dataid>/fields")
def list_fields(dataid: int):
    """GET /api/v1/data/<id>/fields - current field definitions, in id order."""
    session = get_session()
    try:
        store = DataStore(session)
        if store.get_module(dataid) is None:
            abort(404)
        fields = store.get_existing_fields(dataid)
        return jsonify({
            "dataid": dataid,
            "fields": [f.to_dict() for f in fields.values()],
        })
    finally:
        session.close()
