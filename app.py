# app.py
import os
from flask import (
    Flask, render_template, redirect, url_for, request,
    jsonify, current_app, abort
)
from flask_login import (
    LoginManager, login_user, logout_user, login_required,
    current_user
)
from werkzeug.security import generate_password_hash, check_password_hash
from werkzeug.utils import secure_filename
import config

from models import db, ROLES, seed_plants
from analysis import CannedAnalyzer, save_image
from auth import ROLE_TECHNICIAN, is_owner_or_role, role_required
from commands import CommandQueue
from errors import Forbidden, StorageError, ValidationError
from store import GreenhouseStore, get_store
import i18n
import api

login_manager = LoginManager()
login_manager.login_view = "login"


@login_manager.user_loader
def load_user(uid):
    try:
        return get_store().get_user(int(uid))
    except (TypeError, ValueError):
        return None


# ----------------------
# App setup
# ----------------------
def create_app(overrides=None):
    app = Flask(__name__, instance_relative_config=True)
    app.secret_key = config.FLASK_SECRET

    os.makedirs(app.instance_path, exist_ok=True)
    app.config["SQLALCHEMY_DATABASE_URI"] = (
        config.DATABASE_URI or f"sqlite:///{os.path.join(app.instance_path, 'greenhouse.db')}"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["UPLOAD_FOLDER"] = config.UPLOAD_FOLDER or os.path.join(app.instance_path, "uploads")
    app.config["MAX_CONTENT_LENGTH"] = 50 * 1024 * 1024
    app.config["IOT_API_KEY"] = config.IOT_API_KEY
    app.config["DEBUG_PIN"] = config.DEBUG_PIN
    app.config["OPENAI_API_KEY"] = config.OPENAI_API_KEY
    if overrides:
        app.config.update(overrides)

    db.init_app(app)
    login_manager.init_app(app)
    i18n.init_app(app)

    app.extensions["greenhouse_store"] = GreenhouseStore(db)
    app.extensions["image_analyzer"] = app.config.get("IMAGE_ANALYZER") or CannedAnalyzer()

    register_routes(app)
    app.register_blueprint(api.bp)

    @app.errorhandler(Forbidden)
    def _forbidden(e):
        return "Forbidden", 403

    @app.errorhandler(StorageError)
    def _storage_error(e):
        return "Internal server error", 500

    with app.app_context():
        db.create_all()
        app.logger.info("Database created/checked.")
        if seed_plants():
            app.logger.info("Seeded plant reference data.")

    return app


def _optional_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def register_routes(app):

    # ----------------------
    # Authentication
    # ----------------------
    @app.route("/")
    def home():
        return render_template("home.html")

    @app.route("/register", methods=["GET", "POST"])
    def register():
        if request.method == "POST":
            username = request.form.get("username", "").strip()
            password = request.form.get("password", "")
            role = request.form.get("role", "farmer")
            if not username or not password:
                return render_template("register.html", error="Username and password required.")
            if role not in ROLES:
                role = "farmer"
            try:
                get_store().create_user(username, generate_password_hash(password), role)
            except ValidationError as e:
                return render_template("register.html", error=e.message)
            current_app.logger.info("Registered %s user %s", role, username)
            return redirect(url_for("login"))
        return render_template("register.html", error=None)

    @app.route("/login", methods=["GET", "POST"])
    def login():
        if request.method == "POST":
            username = request.form.get("username", "").strip()
            password = request.form.get("password", "")
            user = get_store().find_user(username)
            if user and check_password_hash(user.password, password):
                login_user(user)
                return redirect(url_for("dashboard"))
            return render_template("login.html", error="Invalid username or password")
        return render_template("login.html", error=None)

    @app.route("/logout")
    def logout():
        logout_user()
        return redirect(url_for("home"))

    # ----------------------
    # Dashboards
    # ----------------------
    @app.route("/dashboard")
    @login_required
    def dashboard():
        store = get_store()
        if current_user.role == ROLE_TECHNICIAN:
            return render_template("technician_dashboard.html",
                                   username=current_user.username,
                                   issues=store.unresolved_issues())
        return render_template("farmer_dashboard.html",
                               username=current_user.username,
                               greenhouses=store.greenhouses_for(current_user.id),
                               plants=store.list_plants())

    @app.route("/add-greenhouse", methods=["POST"])
    @login_required
    def add_greenhouse():
        name = request.form.get("name", "").strip()
        plant_id = _optional_int(request.form.get("plant_id"))
        greenhouse = get_store().add_greenhouse(name, current_user.id, plant_id)
        current_app.logger.info("User %s added greenhouse %s", current_user.id, greenhouse.id)
        return redirect(url_for("dashboard"))

    # ----------------------
    # Greenhouses
    # ----------------------
    @app.route("/greenhouse/<int:greenhouse_id>")
    @login_required
    def greenhouse(greenhouse_id):
        store = get_store()
        gh = store.get_greenhouse(greenhouse_id)
        if not is_owner_or_role(gh, current_user, ROLE_TECHNICIAN):
            abort(403)
        return render_template("greenhouse.html",
                               greenhouse=gh,
                               data=store.recent_readings(greenhouse_id),
                               commands=CommandQueue(store).list_pending(greenhouse_id))

    @app.route("/greenhouse/<int:greenhouse_id>/analyze-image", methods=["POST"])
    @login_required
    def analyze_image(greenhouse_id):
        gh = get_store().get_greenhouse(greenhouse_id)
        if not is_owner_or_role(gh, current_user):
            abort(403)
        upload = request.files.get("plant_image")
        if upload is None or not upload.filename:
            return "No image uploaded.", 400

        image = upload.read()
        try:
            path = save_image(current_app.config["UPLOAD_FOLDER"], greenhouse_id, image)
        except OSError:
            current_app.logger.exception("Error saving image for greenhouse %s", greenhouse_id)
            return "Error analyzing image.", 500
        current_app.logger.info("Stored uploaded image %s (%s)", path, secure_filename(upload.filename))
        result = current_app.extensions["image_analyzer"].analyze(image, i18n.get_locale())
        return render_template("analysis.html", greenhouse=gh, analysis=result.text)

    @app.route("/greenhouse/<int:greenhouse_id>/control", methods=["POST"])
    @login_required
    def control(greenhouse_id):
        payload = request.form or request.get_json(silent=True) or {}
        device = payload.get("device")
        action = payload.get("action")
        try:
            CommandQueue(get_store()).enqueue(greenhouse_id, device, action, current_user)
        except StorageError:
            return "Error storing command.", 500
        return jsonify({"status": "success", "message": f"Command {device}:{action} stored."})

    # ----------------------
    # Debug panel (technicians)
    # ----------------------
    @app.route("/debug")
    @login_required
    @role_required(ROLE_TECHNICIAN)
    def debug():
        return render_template("debug.html", issues=get_store().unresolved_issues())

    @app.route("/simulate-issue", methods=["POST"])
    @login_required
    @role_required(ROLE_TECHNICIAN)
    def simulate_issue():
        pin = request.form.get("pin", "")
        expected = current_app.config.get("DEBUG_PIN")
        if not expected or pin != expected:
            current_app.logger.warning("Wrong debug PIN from user %s", current_user.id)
            return "Incorrect PIN", 403
        greenhouse_id = _optional_int(request.form.get("greenhouse_id") or request.form.get("greenhouseId"))
        get_store().add_issue(greenhouse_id, request.form.get("description", ""))
        return redirect(url_for("debug"))

    @app.route("/resolve-issue/<int:issue_id>", methods=["POST"])
    @login_required
    @role_required(ROLE_TECHNICIAN)
    def resolve_issue(issue_id):
        get_store().resolve_issue(issue_id)
        return redirect(url_for("debug"))


# ----------------------
# Run
# ----------------------
if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=config.PORT, debug=os.environ.get("FLASK_DEBUG") == "1")
