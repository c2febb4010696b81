# api.py
"""Device-facing endpoints, authenticated with the shared X-API-Key."""
import base64
import binascii

from flask import Blueprint, current_app, jsonify, request

from analysis import save_image
from auth import api_key_required
from commands import CommandQueue
from errors import GreenhouseError
from i18n import get_locale
from store import get_store

bp = Blueprint("api", __name__, url_prefix="/api")


@bp.before_request
@api_key_required
def _check_api_key():
    return None


@bp.errorhandler(GreenhouseError)
def _api_error(e):
    return jsonify({"error": e.message}), e.status_code


@bp.route("/sensor-data", methods=["POST"])
def sensor_data():
    data = request.get_json(silent=True) or {}
    get_store().add_reading(data.get("greenhouse_id"), data)
    return jsonify({"status": "success"})


@bp.route("/greenhouse/<int:greenhouse_id>/commands", methods=["GET"])
def pending_commands(greenhouse_id):
    queue = CommandQueue(get_store())
    return jsonify({"commands": [c.to_dict() for c in queue.list_pending(greenhouse_id)]})


@bp.route("/greenhouse/<int:greenhouse_id>/commands/<int:command_id>/acknowledge", methods=["POST"])
def acknowledge_command(greenhouse_id, command_id):
    CommandQueue(get_store()).acknowledge(command_id)
    return jsonify({"status": "success"})


@bp.route("/greenhouse/<int:greenhouse_id>/image", methods=["POST"])
def upload_image(greenhouse_id):
    data = request.get_json(silent=True) or {}
    encoded = data.get("image")
    if not encoded:
        return jsonify({"error": "No image provided."}), 400
    try:
        image = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError, TypeError):
        return jsonify({"error": "Invalid image encoding."}), 400

    try:
        path = save_image(current_app.config["UPLOAD_FOLDER"], greenhouse_id, image)
    except OSError:
        current_app.logger.exception("Error saving image for greenhouse %s", greenhouse_id)
        return jsonify({"error": "Error saving image."}), 500
    current_app.logger.info("Stored device image %s", path)

    result = current_app.extensions["image_analyzer"].analyze(image, get_locale())
    return jsonify({"status": "success", "analysis": result.text})
