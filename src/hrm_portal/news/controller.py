from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..api.auth import current_user, roles_required, token_required
from ..api.payload import dump, parse_body
from ..common.datetime_utils import now_local
from ..common.pagination import PageQuery
from ..core.enums import Role
from .model import News
from .schemas import NewsCreateIn, NewsOut, NewsUpdateIn
from .service import NewsData


def _news_json(item: News, now) -> dict:
    return dump(NewsOut, {**asdict(item), "is_new": item.is_new(now)})


def register(app: Flask, container) -> None:
    prefix = app.config["API_PREFIX"]

    @app.route(f"{prefix}/news", methods=["GET"], endpoint="news_list")
    def news_list():
        page = container.news_service.list(PageQuery.from_args(request.args, default_sort="createdAt"))
        now = now_local()
        return jsonify({"news": [_news_json(item, now) for item in page.items], "pagination": page.meta()})

    @app.route(f"{prefix}/news/<int:news_id>", methods=["GET"], endpoint="news_get")
    def news_get(news_id: int):
        return jsonify(_news_json(container.news_service.get(news_id), now_local()))

    @app.route(f"{prefix}/news", methods=["POST"], endpoint="news_create")
    @roles_required(Role.ADMIN)
    def news_create():
        body = parse_body(NewsCreateIn)
        item = container.news_service.create(
            current_user(),
            NewsData(title=body.title, content=body.content, thumbnail=body.thumbnail, tags=body.tags),
        )
        return jsonify(_news_json(item, now_local())), 201

    @app.route(f"{prefix}/news/<int:news_id>", methods=["PUT"], endpoint="news_update")
    @roles_required(Role.ADMIN)
    def news_update(news_id: int):
        body = parse_body(NewsUpdateIn)
        item = container.news_service.update(
            news_id,
            title=body.title,
            content=body.content,
            thumbnail=body.thumbnail,
            tags=body.tags,
        )
        return jsonify(_news_json(item, now_local()))

    @app.route(f"{prefix}/news/<int:news_id>", methods=["DELETE"], endpoint="news_delete")
    @token_required
    def news_delete(news_id: int):
        container.news_service.delete(current_user(), news_id)
        return jsonify({"message": "News deleted successfully"})
