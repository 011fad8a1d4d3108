from pathlib import Path
from typing import Optional

# Import configuration management
import sys
sys.path.append(str(Path(__file__).parent.parent))
from config_manager import ConfigManager

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from app.matching.factory import create_matching_module

BASE_DIR = Path(__file__).parent.parent


def create_app(config_manager: Optional[ConfigManager] = None, data_dir: Optional[Path] = None) -> Flask:
    """Build the Flask application.

    Args:
        config_manager: Configuration source, defaults to matching_config.json + env
        data_dir: Override for the data directory (tests)
    """
    config_manager = config_manager or ConfigManager()
    paths_config = config_manager.get_paths_config()
    matching_config = config_manager.get_matching_config()

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
        app.wsgi_app,
        x_proto=1,   # trust 1 hop for X-Forwarded-Proto
        x_host=1,    # trust 1 hop for X-Forwarded-Host
        x_prefix=1)  # <-- pay attention to X-Forwarded-Prefix

    # -------------------------------------------------------------------------
    # Matching module
    # -------------------------------------------------------------------------

    matching_module = create_matching_module(
        data_dir=Path(data_dir) if data_dir else BASE_DIR / paths_config.data_dir,
        default_limit=matching_config.default_limit,
        recommendations_per_minute=matching_config.recommendations_per_minute,
    )
    app.register_blueprint(matching_module["blueprint"])
    app.extensions["matching"] = matching_module

    @app.route("/health")
    def health_check():
        """Health check endpoint."""
        return jsonify({"status": "ok", "service": "matching"})

    return app
