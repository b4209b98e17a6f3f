"""Flask API for flowsketch.

This provides REST endpoints for:
- Parsing a flow description into steps and a diagram graph
- Generating a flow description from a topic, then diagramming it
- Project save/load
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS

from ..config.settings import Settings, get_settings
from ..core.exceptions import ConfigurationError, GenerationError, ProjectNotFoundError
from ..flowchart.model import LayoutParams
from ..flowchart.pipeline import build_diagram, diagram_from_topic
from ..generation.describe import AnthropicFlowDescriber, FlowDescriber
from ..storage.repository import Project, ProjectRepository, SQLiteProjectRepository
from ..utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[ProjectRepository] = None,
    describer: Optional[FlowDescriber] = None,
) -> Flask:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    app = Flask(__name__)
    CORS(app, origins=settings.cors_origins)
    app.extensions["flowsketch"] = {
        "settings": settings,
        "repository": repository or SQLiteProjectRepository(settings.db_path),
        "describer": describer or AnthropicFlowDescriber(settings),
    }
    _register_routes(app)
    return app


def _state(name: str) -> Any:
    return current_app.extensions["flowsketch"][name]


def _layout_params(payload: Dict[str, Any]) -> LayoutParams:
    base = LayoutParams.from_settings(_state("settings"))
    layout = payload.get("layout")
    return LayoutParams.from_dict(layout if isinstance(layout, dict) else None, base)


def _json_body() -> Tuple[Optional[Dict[str, Any]], Optional[Tuple[Any, int]]]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None, (jsonify({"error": "Request body must be a JSON object"}), 400)
    return payload, None


def _register_routes(app: Flask) -> None:
    @app.route("/api/health")
    def health():
        """Health check."""
        return jsonify({"status": "healthy"})

    # -------------------------------------------------------------------------
    # Diagram Endpoints
    # -------------------------------------------------------------------------

    @app.route("/api/diagram/parse", methods=["POST"])
    def parse_diagram():
        payload, error = _json_body()
        if error:
            return error
        text = payload.get("text")
        if not isinstance(text, str):
            return jsonify({"error": "Field 'text' must be a string"}), 400

        result = build_diagram(text, _layout_params(payload))
        return jsonify(result.to_dict())

    @app.route("/api/diagram/generate", methods=["POST"])
    def generate_diagram():
        payload, error = _json_body()
        if error:
            return error
        topic = payload.get("topic")
        if not isinstance(topic, str) or not topic.strip():
            return jsonify({"error": "Field 'topic' is required"}), 400

        try:
            result = diagram_from_topic(topic, _state("describer"), _layout_params(payload))
        except ConfigurationError as exc:
            logger.error("Describer is not configured", extra={"error": str(exc)})
            return jsonify({"error": exc.message}), 503
        except GenerationError as exc:
            return jsonify({"error": exc.message}), 502
        return jsonify(result.to_dict())

    # -------------------------------------------------------------------------
    # Project Endpoints
    # -------------------------------------------------------------------------

    @app.route("/api/projects", methods=["GET"])
    def list_projects():
        limit = request.args.get("limit", type=int)
        offset = request.args.get("offset", default=0, type=int)
        projects = _state("repository").list(limit=limit, offset=offset)
        return jsonify({
            "projects": [p.model_dump(mode="json") for p in projects],
            "count": len(projects),
        })

    @app.route("/api/projects", methods=["POST"])
    def save_project():
        payload, error = _json_body()
        if error:
            return error
        title = payload.get("title")
        description = payload.get("description", "")
        if not isinstance(title, str) or not title.strip():
            return jsonify({"error": "Field 'title' is required"}), 400
        if not isinstance(description, str):
            return jsonify({"error": "Field 'description' must be a string"}), 400

        repository = _state("repository")
        project_id = payload.get("id")
        project = repository.get(project_id) if isinstance(project_id, str) else None
        if project is None:
            project = Project(title=title.strip())
            if isinstance(project_id, str) and project_id:
                project.id = project_id
        project.title = title.strip()
        project.topic = str(payload.get("topic") or project.topic)
        project.description = description

        repository.save(project)
        return jsonify(project.model_dump(mode="json")), 201

    @app.route("/api/projects/<project_id>", methods=["GET"])
    def get_project(project_id: str):
        try:
            project = _state("repository").require(project_id)
        except ProjectNotFoundError as exc:
            return jsonify({"error": exc.message}), 404

        result = build_diagram(project.description, LayoutParams.from_settings(_state("settings")))
        body = project.model_dump(mode="json")
        body["diagram"] = result.to_dict()
        return jsonify(body)

    @app.route("/api/projects/<project_id>", methods=["DELETE"])
    def delete_project(project_id: str):
        if _state("repository").delete(project_id):
            return jsonify({"deleted": project_id})
        return jsonify({"error": "Project not found"}), 404
