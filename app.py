from __future__ import annotations

import logging
from typing import Dict

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

import about
import auth
import comments
import config
import posts
import store
import uploads
from errors import BlogError, StorageError, Unauthorized, ValidationError


app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = config.MAX_CONTENT_LENGTH
CORS(app)


def request_data() -> Dict:
    """JSON body if there is one, otherwise the submitted form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def ok(**payload):
    return jsonify({"ok": True, **payload})


@app.errorhandler(BlogError)
def handle_blog_error(err: BlogError):
    if isinstance(err, StorageError):
        app.logger.error(
            "Storage failure on %s %s", request.method, request.path, exc_info=err
        )
        return jsonify({"ok": False, "message": "Internal server error"}), 500
    return jsonify({"ok": False, "message": err.message}), err.status_code


@app.errorhandler(HTTPException)
def handle_http_error(err: HTTPException):
    return jsonify({"ok": False, "message": err.description}), err.code


@app.route("/api/ping")
def ping():
    return ok(time=store.now_iso())


@app.route("/api/login", methods=["POST"])
def login():
    password = request_data().get("password")
    if not password:
        raise ValidationError("Missing password")
    if not auth.check(password):
        raise Unauthorized("Incorrect password")
    return ok()


# -------- posts --------


@app.route("/api/posts", methods=["GET"])
def list_posts():
    return jsonify(
        posts.list_posts(
            category=request.args.get("category"),
            tag=request.args.get("tag"),
            query=request.args.get("q"),
            page=request.args.get("page", type=int),
            limit=request.args.get("limit", type=int),
        )
    )


@app.route("/api/posts/<post_id>", methods=["GET"])
def get_post(post_id: str):
    return jsonify(posts.get_post(post_id))


@app.route("/api/posts", methods=["POST"])
@auth.admin_required
def create_post():
    data = request_data()
    posts.validate_post_fields(
        data.get("title"), data.get("content"), data.get("contentMarkdown")
    )

    main_image = uploads.save_optional(request.files.get("mainImage"))
    extra_images = uploads.save_many(
        request.files.getlist("extraImages")[: config.MAX_EXTRA_IMAGES]
    )
    post = posts.create_post(
        title=data.get("title"),
        content=data.get("content"),
        category=data.get("category"),
        tags=data.get("tags"),
        main_image=main_image or "",
        extra_images=extra_images,
        content_markdown=data.get("contentMarkdown"),
    )
    return ok(data=post)


@app.route("/api/posts/<post_id>", methods=["PUT"])
@auth.admin_required
def update_post(post_id: str):
    posts.get_post(post_id)
    fields = dict(request_data())
    main_image = uploads.save_optional(request.files.get("mainImage"))
    if main_image:
        fields["mainImage"] = main_image
    return ok(data=posts.update_post(post_id, fields))


@app.route("/api/posts/<post_id>", methods=["DELETE"])
@auth.admin_required
def delete_post(post_id: str):
    posts.delete_post(post_id)
    return ok()


@app.route("/api/posts/<post_id>/like", methods=["POST"])
def like_post(post_id: str):
    return ok(likes=posts.toggle_like(post_id, auth.visitor_identity()))


@app.route("/api/categories")
def list_categories():
    return jsonify(posts.list_categories())


@app.route("/api/tags")
def list_tags():
    return jsonify(posts.list_tags())


# -------- comments --------


@app.route("/api/comments", methods=["GET"])
@auth.admin_required
def list_all_comments():
    return jsonify(comments.list_all())


@app.route("/api/comments/<post_id>", methods=["GET"])
def list_comments(post_id: str):
    return jsonify(comments.list_for_post(post_id))


@app.route("/api/comments/<post_id>", methods=["POST"])
def create_comment(post_id: str):
    data = request_data()
    comment = comments.create_comment(
        post_id,
        text=data.get("text"),
        visitor=auth.visitor_identity(),
        name=data.get("name"),
    )
    return ok(data=comment)


@app.route("/api/comments/<comment_id>", methods=["PUT"])
def update_comment(comment_id: str):
    comment = comments.update_comment(
        comment_id,
        text=request_data().get("text"),
        visitor=auth.visitor_identity(),
        is_admin=auth.is_admin_request(),
    )
    return ok(data=comment)


@app.route("/api/comments/<comment_id>", methods=["DELETE"])
@auth.admin_required
def delete_comment(comment_id: str):
    comments.delete_comment(comment_id)
    return ok()


# -------- about --------


@app.route("/api/about", methods=["GET"])
def get_about():
    return jsonify(about.get_about())


@app.route("/api/about", methods=["POST"])
@auth.admin_required
def save_about():
    data = request_data()
    social = data.get("social")
    saved = about.set_about(
        text=data.get("text"),
        email=data.get("email"),
        social=social if isinstance(social, dict) else {},
    )
    return ok(data=saved)


# -------- uploads --------


@app.route("/api/upload", methods=["POST"])
@auth.admin_required
def upload_image():
    url = uploads.save_optional(request.files.get("image"))
    if not url:
        raise ValidationError("No file uploaded")
    return ok(url=url)


@app.route(f"{config.UPLOADS_URL_PREFIX}/<path:filename>")
def uploaded_file(filename: str):
    return send_from_directory(config.UPLOADS_DIR, filename)


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store.ensure_data_files()
    app.logger.info("Serving API on http://%s:%s/api", config.HOST, config.PORT)
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
