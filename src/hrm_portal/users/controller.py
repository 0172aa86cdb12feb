from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.auth import current_user, roles_required, token_required
from ..api.payload import dump, dump_many, parse_body
from ..core.enums import Role
from .schemas import (
    AccountCreateIn,
    AccountUpdateIn,
    ChangePasswordIn,
    LoginIn,
    ProfileIn,
    RegisterIn,
    UserBriefOut,
    UserOut,
)
from .service import AuthSession, NewAccount


def _session_json(session: AuthSession) -> dict:
    return {"token": session.token, "user": dump(UserBriefOut, session.user)}


def register(app: Flask, container) -> None:
    prefix = app.config["API_PREFIX"]

    @app.route(f"{prefix}/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        body = parse_body(RegisterIn)
        session = container.auth_service.register(
            NewAccount(
                username=body.username,
                email=body.email,
                password=body.password,
                first_name=body.first_name,
                last_name=body.last_name,
                profile=body.profile(),
            )
        )
        return jsonify(_session_json(session)), 201

    @app.route(f"{prefix}/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = parse_body(LoginIn)
        session = container.auth_service.login(body.username, body.password)
        return jsonify(_session_json(session))

    @app.route(f"{prefix}/auth/me", methods=["GET"], endpoint="auth_me")
    @token_required
    def auth_me():
        user = container.auth_service.get_profile(current_user().user_id)
        return jsonify(dump(UserOut, user))

    @app.route(f"{prefix}/auth/profile", methods=["PUT"], endpoint="auth_update_profile")
    @token_required
    def auth_update_profile():
        body = parse_body(ProfileIn)
        user = container.auth_service.update_profile(current_user(), body.model_dump(exclude_unset=True))
        return jsonify(dump(UserOut, user))

    @app.route(f"{prefix}/auth/change-password", methods=["PUT"], endpoint="auth_change_password")
    @token_required
    def auth_change_password():
        body = parse_body(ChangePasswordIn)
        container.auth_service.change_password(
            current_user(),
            current_password=body.current_password,
            new_password=body.new_password,
            confirm_password=body.confirm_password,
        )
        return jsonify({"message": "Password changed successfully"})

    @app.route(f"{prefix}/admin/accounts", methods=["GET"], endpoint="admin_list_accounts")
    @roles_required(Role.ADMIN)
    def admin_list_accounts():
        users = container.account_service.list_accounts(search=(request.args.get("search") or "").strip())
        return jsonify(dump_many(UserOut, users))

    @app.route(f"{prefix}/admin/accounts/<int:user_id>", methods=["GET"], endpoint="admin_get_account")
    @roles_required(Role.ADMIN)
    def admin_get_account(user_id: int):
        return jsonify(dump(UserOut, container.account_service.get_account(user_id)))

    @app.route(f"{prefix}/admin/accounts", methods=["POST"], endpoint="admin_create_account")
    @roles_required(Role.ADMIN)
    def admin_create_account():
        body = parse_body(AccountCreateIn)
        user = container.account_service.create_account(
            NewAccount(
                username=body.username,
                email=body.email,
                password=body.password,
                first_name=body.first_name,
                last_name=body.last_name,
            ),
            role=body.role,
        )
        return jsonify(dump(UserOut, user)), 201

    @app.route(f"{prefix}/admin/accounts/<int:user_id>", methods=["PUT"], endpoint="admin_update_account")
    @roles_required(Role.ADMIN)
    def admin_update_account(user_id: int):
        body = parse_body(AccountUpdateIn)
        user = container.account_service.update_account(user_id, body.model_dump(exclude_none=True))
        return jsonify(dump(UserOut, user))

    @app.route(f"{prefix}/admin/accounts/<int:user_id>", methods=["DELETE"], endpoint="admin_delete_account")
    @roles_required(Role.ADMIN)
    def admin_delete_account(user_id: int):
        container.account_service.delete_account(current_user(), user_id)
        return jsonify({"message": "Account deleted successfully"})
