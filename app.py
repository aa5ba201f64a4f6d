from flask import Flask, render_template, request, redirect, url_for, flash
from werkzeug.utils import secure_filename
import os, logging

from thumber import Thumber

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif", "bmp", "tif", "tiff"}
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB per file
logging.basicConfig(level=logging.INFO)


def allowed_file(filename):
    ext = filename.rsplit('.', 1)[-1].lower()
    return ext in ALLOWED_EXTENSIONS


def create_app(config=None):
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET", "change-this-secret")
    app.config["MAX_CONTENT_LENGTH"] = MAX_FILE_SIZE
    if "THUMBER_TARGET" in os.environ:
        app.config["THUMBER_TARGET"] = os.environ["THUMBER_TARGET"]
    app.config.update(config or {})

    Thumber(app)
    os.makedirs(app.config["THUMBER_SOURCE_DIR"], exist_ok=True)

    @app.route("/", methods=["GET", "POST"])
    def index():
        if request.method == "POST":
            files = request.files.getlist("images")
            if not files or all(f.filename == "" for f in files):
                flash("No files uploaded.", "danger")
                return redirect(url_for("index"))

            for file in files:
                filename = secure_filename(file.filename)
                if not filename or not allowed_file(filename):
                    flash(f"{file.filename} has invalid file type.", "danger")
                    continue
                file.save(os.path.join(app.config["THUMBER_SOURCE_DIR"], filename))
                logging.info("Uploaded %s", filename)
            return redirect(url_for("index"))

        images = sorted(
            name for name in os.listdir(app.config["THUMBER_SOURCE_DIR"]) if allowed_file(name)
        )
        return render_template("index.html", images=images)

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
