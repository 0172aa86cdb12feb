from __future__ import annotations

from flask import Flask, jsonify

from ..api.auth import current_user, roles_required, token_required
from ..api.payload import dump, dump_many, parse_body
from .schemas import GroupCreateIn, GroupDetailOut, GroupOut, GroupUpdateIn, MemberIn
from .service import GROUP_ADMIN_ROLES, GROUP_EDITOR_ROLES, NewGroup


def register(app: Flask, container) -> None:
    prefix = app.config["API_PREFIX"]

    @app.route(f"{prefix}/groups", methods=["POST"], endpoint="groups_create")
    @roles_required(*GROUP_ADMIN_ROLES)
    def groups_create():
        body = parse_body(GroupCreateIn)
        group = container.group_service.create_group(
            current_user(),
            NewGroup(
                name=body.name,
                level=body.level,
                description=body.description,
                manager_id=body.manager_id,
                parent_group_id=body.parent_group_id,
            ),
        )
        return jsonify(dump(GroupOut, group)), 201

    @app.route(f"{prefix}/groups", methods=["GET"], endpoint="groups_list")
    @roles_required(*GROUP_ADMIN_ROLES)
    def groups_list():
        return jsonify(dump_many(GroupOut, container.group_service.list_groups(current_user())))

    @app.route(f"{prefix}/groups/<int:group_id>", methods=["GET"], endpoint="groups_get")
    @token_required
    def groups_get(group_id: int):
        return jsonify(dump(GroupDetailOut, container.group_service.get_group(current_user(), group_id)))

    @app.route(f"{prefix}/groups/<int:group_id>", methods=["PUT"], endpoint="groups_update")
    @roles_required(*GROUP_EDITOR_ROLES)
    def groups_update(group_id: int):
        body = parse_body(GroupUpdateIn)
        group = container.group_service.update_group(
            current_user(),
            group_id,
            name=body.name,
            description=body.description,
            manager_id=body.manager_id,
        )
        return jsonify(dump(GroupOut, group))

    @app.route(f"{prefix}/groups/<int:group_id>/members", methods=["POST"], endpoint="groups_add_member")
    @roles_required(*GROUP_ADMIN_ROLES)
    def groups_add_member(group_id: int):
        body = parse_body(MemberIn)
        detail = container.group_service.add_member(current_user(), group_id, body.user_id)
        return jsonify(dump(GroupDetailOut, detail))

    @app.route(
        f"{prefix}/groups/<int:group_id>/members/<int:user_id>",
        methods=["DELETE"],
        endpoint="groups_remove_member",
    )
    @roles_required(*GROUP_ADMIN_ROLES)
    def groups_remove_member(group_id: int, user_id: int):
        container.group_service.remove_member(current_user(), group_id, user_id)
        return jsonify({"message": "Member removed successfully"})
