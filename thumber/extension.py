import os
import logging

import click
from flask import Blueprint, current_app, send_from_directory

from .config import ThumberConfig
from .helper import ThumbHelper
from .manager import ThumbManager

logger = logging.getLogger(__name__)

blueprint = Blueprint("thumber", __name__, cli_group="thumber")


@blueprint.route("/<path:filename>")
def thumbnail(filename):
    return send_from_directory(current_app.extensions["thumber"].config.target, filename)


@blueprint.cli.command("clear-all")
@click.option("-v", "--verbose", is_flag=True, help="List every deleted thumbnail.")
def clear_all_command(verbose):
    """Delete all thumbnails."""
    manager = ThumbManager(current_app.extensions["thumber"].config)
    try:
        files = manager.get_all()
        count = manager.clear_all(files)
    except Exception as e:
        logger.error("Error deleting thumbnails: %s", e)
        raise click.ClickException(f"Error deleting thumbnails: {e}") from e

    if verbose:
        for name in files:
            click.echo(f"Deleted {name}")
    click.echo(f"Thumbnails deleted: {count}")


class Thumber:
    """Flask extension registering the ``thumb`` template helper.

    ::

        app = Flask(__name__)
        Thumber(app)
    """

    def __init__(self, app=None):
        self.config = None
        self.helper = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.config = ThumberConfig.from_app(app)
        os.makedirs(self.config.target, exist_ok=True)
        self.helper = ThumbHelper(self.config)

        app.extensions["thumber"] = self
        app.jinja_env.globals["thumb"] = self.helper
        app.register_blueprint(blueprint, url_prefix=self.config.url_prefix)
