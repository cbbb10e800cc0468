"""
Idea Hub - Web API

Flask app serving the idea tracker as JSON. The signed-in user's session
(tokens, profile and developer keys) lives in Flask's signed session cookie.

Run with: python -m web.app
"""

from functools import wraps
from typing import Optional

from flask import Flask, request, jsonify, session, g
from loguru import logger

from ideahub.actions import (
    IdeaActions,
    ActionResult,
    get_guard,
    SIGNED_OUT,
    DISABLED,
    NOT_FOUND,
    IN_FLIGHT,
    STORAGE,
)
from ideahub.auth import AuthError, AuthSession, SessionProvider, SupabaseAuth
from ideahub.config import (
    DEBUG,
    FLASK_SECRET_KEY,
    is_supabase_configured,
    configure_logging,
    validate_config,
    print_config_summary,
)
from ideahub.keys import DevKeyStore
from ideahub.notifications import Notifier
from ideahub.repositories import (
    IdeaRepository,
    GroupRepository,
    SettingsRepository,
    ValidationError,
)
from ideahub.search import filter_ideas
from ideahub.services import (
    DescriptionEnhancer,
    ImageGenerator,
    ScreenshotCapture,
    ServiceResult,
    MISSING_INPUT,
    NOT_CONFIGURED,
    UPSTREAM,
)
from ideahub.storage import Storage, SupabaseStorage

app = Flask(__name__)
app.secret_key = FLASK_SECRET_KEY

AUTH_SESSION_KEY = "auth"

ERROR_STATUS = {
    MISSING_INPUT: 400,
    SIGNED_OUT: 401,
    DISABLED: 403,
    NOT_FOUND: 404,
    IN_FLIGHT: 409,
    NOT_CONFIGURED: 503,
    UPSTREAM: 500,
    STORAGE: 500,
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


# =============================================================================
# Factories (patched in tests)
# =============================================================================

def get_storage(access_token: Optional[str] = None) -> Optional[Storage]:
    """Get Supabase storage acting as the given user."""
    if not is_supabase_configured():
        return None
    return SupabaseStorage(access_token=access_token)


def get_auth() -> SupabaseAuth:
    return SupabaseAuth()


def get_description_enhancer(api_key: Optional[str] = None) -> DescriptionEnhancer:
    return DescriptionEnhancer(api_key=api_key)


def get_image_generator(api_key: Optional[str] = None) -> ImageGenerator:
    return ImageGenerator(api_key=api_key)


def get_screenshot_capture() -> ScreenshotCapture:
    return ScreenshotCapture()


# =============================================================================
# Request helpers
# =============================================================================

def _session_provider() -> SessionProvider:
    return SessionProvider(get_auth(), AuthSession.from_dict(session.get(AUTH_SESSION_KEY)))


def _remember(auth_session: AuthSession) -> None:
    session[AUTH_SESSION_KEY] = auth_session.to_dict()


def _respond(payload: dict, status: int = 200):
    """JSON response carrying any notifications queued during the request."""
    notifier = g.get("notifier")
    if notifier is not None:
        payload = {**payload, "notifications": notifier.drain()}
    return jsonify(payload), status


def _error(message: str, status: int):
    return _respond({"success": False, "error": message}, status)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    """Resolve the session and storage for the request or answer 401/503."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.notifier = Notifier()
        sessions = _session_provider()
        if not sessions.signed_in:
            return _error("Not signed in", 401)

        storage = get_storage(sessions.session.access_token)
        if storage is None:
            return _error("Supabase not configured", 503)

        g.sessions = sessions
        g.storage = storage
        return view(*args, **kwargs)
    return wrapper


def _idea_repository(load: bool = True) -> IdeaRepository:
    repo = IdeaRepository(g.storage, g.sessions, g.notifier)
    if load:
        repo.load()
    return repo


def _load_settings():
    repo = SettingsRepository(g.storage, g.sessions, g.notifier)
    return repo.load()


def _action_response(result: ActionResult):
    if result.success:
        return _respond({"success": True, "idea": result.idea.to_dict()})
    return _error(result.error, ERROR_STATUS.get(result.error_kind, 500))


def _actions(repo: IdeaRepository) -> IdeaActions:
    return IdeaActions(
        repo,
        _load_settings(),
        notifier=g.notifier,
        dev_keys=DevKeyStore(session),
        guard=get_guard(),
        enhancer_factory=get_description_enhancer,
        image_generator_factory=get_image_generator,
        screenshot_factory=get_screenshot_capture,
    )


# =============================================================================
# Auth
# =============================================================================

def _auth_failure(e: AuthError):
    status = e.status_code if e.status_code and 400 <= e.status_code < 500 else 500
    return _error(str(e), status)


@app.route("/api/auth/signup", methods=["POST"])
def api_signup():
    """Create an account; signs in immediately unless email confirmation is required."""
    g.notifier = Notifier()
    data = _json_body()
    auth = get_auth()
    if not auth.is_available():
        return _error("Supabase not configured", 503)

    sessions = SessionProvider(auth)
    try:
        new_session = sessions.sign_up(
            data.get("email", ""),
            data.get("password", ""),
            display_name=data.get("display_name", ""),
            confirm_password=data.get("confirm_password"),
        )
    except AuthError as e:
        return _auth_failure(e)

    if new_session.signed_in:
        _remember(new_session)
    g.notifier.success("Account created!", "Please check your email to verify your account.")
    return _respond({
        "success": True,
        "user": new_session.user.to_dict() if new_session.user else None,
        "confirmation_required": new_session.confirmation_required,
    }, 201)


@app.route("/api/auth/signin", methods=["POST"])
def api_signin():
    g.notifier = Notifier()
    data = _json_body()
    auth = get_auth()
    if not auth.is_available():
        return _error("Supabase not configured", 503)

    sessions = SessionProvider(auth)
    try:
        new_session = sessions.sign_in(data.get("email", ""), data.get("password", ""))
    except AuthError as e:
        return _auth_failure(e)

    storage = get_storage(new_session.access_token)
    if storage is not None:
        sessions.load_profile(storage)
    _remember(sessions.session)

    g.notifier.success("Welcome back!", "You have been signed in successfully.")
    return _respond({
        "success": True,
        "user": new_session.user.to_dict(),
        "profile": new_session.profile.to_dict() if new_session.profile else None,
    })


@app.route("/api/auth/signout", methods=["POST"])
def api_signout():
    g.notifier = Notifier()
    _session_provider().sign_out()
    session.pop(AUTH_SESSION_KEY, None)
    DevKeyStore(session).clear()
    return _respond({"success": True})


@app.route("/api/auth/me")
def api_me():
    sessions = _session_provider()
    if not sessions.signed_in:
        return jsonify({"error": "Not signed in"}), 401
    profile = sessions.profile
    return jsonify({
        "user": sessions.user.to_dict(),
        "profile": profile.to_dict() if profile else None,
    })


# =============================================================================
# Ideas
# =============================================================================

@app.route("/api/ideas", methods=["GET"])
@login_required
def api_list_ideas():
    """List ideas newest-first, filtered by q, status, tags (comma separated) and group."""
    repo = _idea_repository()
    if not repo.loaded:
        return _error("Failed to load ideas", 500)

    query = request.args.get("q", "").strip()
    status = request.args.get("status", "all")
    tags = [t.strip() for t in request.args.get("tags", "").split(",") if t.strip()]
    group = request.args.get("group")

    try:
        ideas = filter_ideas(repo.ideas, query, status, tags)
    except ValueError as e:
        return _error(str(e), 400)

    if group == "none":
        ideas = [i for i in ideas if not i.group_id]
    elif group:
        ideas = [i for i in ideas if i.group_id == group]

    return _respond({
        "success": True,
        "total": len(repo.ideas),
        "count": len(ideas),
        "tags": repo.all_tags,
        "ideas": [i.to_dict() for i in ideas],
    })


@app.route("/api/ideas", methods=["POST"])
@login_required
def api_create_idea():
    repo = _idea_repository(load=False)
    try:
        idea = repo.add(_json_body())
    except ValidationError as e:
        return _error(str(e), 400)

    if idea is None:
        return _error("Failed to save the idea", 500)
    return _respond({"success": True, "idea": idea.to_dict()}, 201)


@app.route("/api/ideas/stats")
@login_required
def api_idea_stats():
    """Idea counts per status for the dashboard header."""
    repo = _idea_repository()
    if not repo.loaded:
        return _error("Failed to load ideas", 500)
    return _respond({
        "total": len(repo.ideas),
        "by_status": repo.status_counts,
        "tags": len(repo.all_tags),
    })


@app.route("/api/ideas/<idea_id>", methods=["GET"])
@login_required
def api_get_idea(idea_id):
    repo = _idea_repository()
    idea = repo.get(idea_id)
    if idea is None:
        return _error("Idea not found", 404)
    return _respond({"success": True, "idea": idea.to_dict()})


@app.route("/api/ideas/<idea_id>", methods=["PATCH"])
@login_required
def api_update_idea(idea_id):
    repo = _idea_repository()
    if repo.get(idea_id) is None:
        return _error("Idea not found", 404)

    try:
        idea = repo.update(idea_id, _json_body())
    except ValidationError as e:
        return _error(str(e), 400)

    if idea is None:
        return _error("Failed to update the idea", 500)
    return _respond({"success": True, "idea": idea.to_dict()})


@app.route("/api/ideas/<idea_id>", methods=["DELETE"])
@login_required
def api_delete_idea(idea_id):
    repo = _idea_repository()
    if repo.get(idea_id) is None:
        return _error("Idea not found", 404)
    if not repo.remove(idea_id):
        return _error("Failed to delete the idea", 500)
    return _respond({"success": True})


# =============================================================================
# Idea actions
# =============================================================================

@app.route("/api/ideas/<idea_id>/enhance", methods=["POST"])
@login_required
def api_enhance_idea(idea_id):
    repo = _idea_repository()
    return _action_response(_actions(repo).enhance_description(idea_id))


@app.route("/api/ideas/<idea_id>/undo-enhance", methods=["POST"])
@login_required
def api_undo_enhance(idea_id):
    repo = _idea_repository()
    return _action_response(_actions(repo).undo_enhancement(idea_id))


@app.route("/api/ideas/<idea_id>/generate-image", methods=["POST"])
@login_required
def api_generate_image(idea_id):
    repo = _idea_repository()
    return _action_response(_actions(repo).generate_image(idea_id))


@app.route("/api/ideas/<idea_id>/screenshot", methods=["POST"])
@login_required
def api_capture_screenshot(idea_id):
    repo = _idea_repository()
    url = _json_body().get("url", "")
    return _action_response(_actions(repo).capture_screenshot(idea_id, url))


@app.route("/api/ideas/<idea_id>/image", methods=["POST"])
@login_required
def api_upload_image(idea_id):
    """Multipart upload of a user image (field name `file`)."""
    upload = request.files.get("file")
    if upload is None:
        return _error("Image file is required", 400)

    repo = _idea_repository()
    result = _actions(repo).upload_image(
        idea_id, upload.filename, upload.read(), upload.mimetype or ""
    )
    return _action_response(result)


# =============================================================================
# Groups
# =============================================================================

@app.route("/api/groups", methods=["GET"])
@login_required
def api_list_groups():
    repo = GroupRepository(g.storage, g.sessions, g.notifier)
    repo.load()
    if not repo.loaded:
        return _error("Failed to load groups", 500)
    return _respond({"success": True, "groups": [grp.to_dict() for grp in repo.groups]})


@app.route("/api/groups", methods=["POST"])
@login_required
def api_create_group():
    repo = GroupRepository(g.storage, g.sessions, g.notifier)
    try:
        group = repo.add(_json_body())
    except ValidationError as e:
        return _error(str(e), 400)
    if group is None:
        return _error("Failed to create the group", 500)
    return _respond({"success": True, "group": group.to_dict()}, 201)


@app.route("/api/groups/<group_id>", methods=["PATCH"])
@login_required
def api_update_group(group_id):
    repo = GroupRepository(g.storage, g.sessions, g.notifier)
    try:
        group = repo.update(group_id, _json_body())
    except ValidationError as e:
        return _error(str(e), 400)
    if group is None:
        return _error("Failed to update the group", 500)
    return _respond({"success": True, "group": group.to_dict()})


@app.route("/api/groups/<group_id>", methods=["DELETE"])
@login_required
def api_delete_group(group_id):
    """Delete a group; its ideas stay and become ungrouped."""
    ideas = _idea_repository()
    affected = [i.id for i in ideas.ideas if i.group_id == group_id]

    repo = GroupRepository(g.storage, g.sessions, g.notifier)
    if not repo.remove(group_id):
        return _error("Failed to delete the group", 500)

    ideas.ungroup_local(group_id)
    return _respond({"success": True, "ungrouped": affected})


# =============================================================================
# Settings
# =============================================================================

@app.route("/api/settings", methods=["GET"])
@login_required
def api_get_settings():
    settings = _load_settings()
    return _respond({
        "success": True,
        "settings": settings.to_dict(),
        "dev_keys": DevKeyStore(session).configured(),
    })


@app.route("/api/settings", methods=["PUT"])
@login_required
def api_save_settings():
    repo = SettingsRepository(g.storage, g.sessions, g.notifier)
    repo.load()
    try:
        saved = repo.save(**_json_body())
    except ValidationError as e:
        return _error(str(e), 400)
    if saved is None:
        return _error("Failed to save settings", 500)
    return _respond({"success": True, "settings": saved.to_dict()})


@app.route("/api/settings/dev-keys", methods=["PUT"])
@login_required
def api_save_dev_keys():
    """Keep developer API keys in this browser session only."""
    keys = DevKeyStore(session)
    try:
        keys.update(_json_body())
    except ValueError as e:
        return _error(str(e), 400)
    g.notifier.success("API keys saved", "Keys are stored for this session only.")
    return _respond({"success": True, "dev_keys": keys.configured()})


@app.route("/api/settings/dev-keys", methods=["DELETE"])
@login_required
def api_clear_dev_keys():
    keys = DevKeyStore(session)
    keys.clear()
    return _respond({"success": True, "dev_keys": keys.configured()})


# =============================================================================
# Proxy functions
# =============================================================================

def _function_response(result: ServiceResult):
    status = 200 if result.success else ERROR_STATUS.get(result.error_kind, 500)
    return jsonify(result.to_envelope()), status, CORS_HEADERS


def _preflight():
    return "ok", 200, CORS_HEADERS


def _function_auth_error():
    if not _session_provider().signed_in:
        return jsonify({"success": False, "error": "Not signed in"}), 401, CORS_HEADERS
    return None


@app.route("/api/functions/capture-screenshot", methods=["POST", "OPTIONS"])
def fn_capture_screenshot():
    if request.method == "OPTIONS":
        return _preflight()
    denied = _function_auth_error()
    if denied:
        return denied
    data = _json_body()
    return _function_response(get_screenshot_capture().capture(data.get("url", "")))


@app.route("/api/functions/enhance-description", methods=["POST", "OPTIONS"])
def fn_enhance_description():
    if request.method == "OPTIONS":
        return _preflight()
    denied = _function_auth_error()
    if denied:
        return denied
    data = _json_body()
    enhancer = get_description_enhancer(data.get("apiKey"))
    return _function_response(enhancer.enhance(data.get("title", ""), data.get("description", "")))


@app.route("/api/functions/generate-image", methods=["POST", "OPTIONS"])
def fn_generate_image():
    if request.method == "OPTIONS":
        return _preflight()
    denied = _function_auth_error()
    if denied:
        return denied
    data = _json_body()
    generator = get_image_generator(data.get("apiKey"))
    return _function_response(generator.generate(data.get("prompt", "")))


# =============================================================================
# Status
# =============================================================================

@app.route("/api/status")
def api_status():
    """Which backends are configured."""
    return jsonify({
        "supabase": is_supabase_configured(),
        "description_enhancement": get_description_enhancer().is_available(),
        "image_generation": get_image_generator().is_available(),
        "screenshots": get_screenshot_capture().is_available(),
    })


if __name__ == "__main__":
    configure_logging()
    for problem in validate_config():
        logger.warning(f"Config: {problem}")
    print("=" * 50)
    print("💡 Idea Hub API")
    print("=" * 50)
    print_config_summary()
    print("Open http://localhost:5001 in your browser")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(debug=DEBUG, port=5001)
