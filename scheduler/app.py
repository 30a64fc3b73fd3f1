from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, send_from_directory

from .db import create_db_engine, init_db, make_session_factory
from .handlers.api import build_blueprint
from .services.task_service import TaskService
from .services.task_store import TaskStore
from .settings import Settings, get_settings

log = logging.getLogger(__name__)


def build_service(settings: Settings) -> TaskService:
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    return TaskService(TaskStore(make_session_factory(engine)))


def build_application(settings: Settings, service: Optional[TaskService] = None) -> Flask:
    if service is None:
        service = build_service(settings)
    web_dir = Path(settings.web_dir).resolve()
    application = Flask(__name__, static_folder=None)
    application.register_blueprint(build_blueprint(service))

    @application.get("/")
    @application.get("/<path:filename>")
    def static_files(filename: str = "index.html"):
        return send_from_directory(web_dir, filename)

    return application


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    app = build_application(settings)
    log.info("Server is running on port %s...", settings.port)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
