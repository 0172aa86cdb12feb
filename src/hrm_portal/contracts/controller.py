from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.auth import current_user, roles_required, token_required
from ..api.payload import dump, dump_many, parse_args, parse_body
from ..common.pagination import Page, PageQuery
from ..core.enums import Role
from .schemas import ContractCreateIn, ContractFilterQuery, ContractOut, ContractUpdateIn
from .service import NewContract


def _page_json(page: Page) -> dict:
    return {"contracts": dump_many(ContractOut, page.items), "pagination": page.meta()}


def register(app: Flask, container) -> None:
    prefix = app.config["API_PREFIX"]

    @app.route(f"{prefix}/contracts", methods=["GET"], endpoint="contracts_list")
    @roles_required(Role.ADMIN)
    def contracts_list():
        filters = parse_args(ContractFilterQuery)
        page = container.contract_service.list(
            PageQuery.from_args(request.args, default_sort="createdAt"),
            type=filters.type,
            status=filters.status,
        )
        return jsonify(_page_json(page))

    @app.route(f"{prefix}/contracts", methods=["POST"], endpoint="contracts_create")
    @roles_required(Role.ADMIN)
    def contracts_create():
        body = parse_body(ContractCreateIn)
        contract = container.contract_service.create(
            NewContract(device_id=body.device_id, user_id=body.user_id, type=body.type, note=body.note)
        )
        return jsonify(dump(ContractOut, contract)), 201

    @app.route(f"{prefix}/contracts/<int:contract_id>", methods=["GET"], endpoint="contracts_get")
    @roles_required(Role.ADMIN)
    def contracts_get(contract_id: int):
        return jsonify(dump(ContractOut, container.contract_service.get(contract_id)))

    @app.route(f"{prefix}/contracts/<int:contract_id>", methods=["PUT"], endpoint="contracts_update")
    @roles_required(Role.ADMIN)
    def contracts_update(contract_id: int):
        body = parse_body(ContractUpdateIn)
        contract = container.contract_service.update(
            contract_id,
            device_id=body.device_id,
            user_id=body.user_id,
            type=body.type,
            note=body.note,
        )
        return jsonify(dump(ContractOut, contract))

    @app.route(f"{prefix}/contracts/<int:contract_id>", methods=["DELETE"], endpoint="contracts_delete")
    @roles_required(Role.ADMIN)
    def contracts_delete(contract_id: int):
        container.contract_service.delete(contract_id)
        return jsonify({"message": "Contract deleted successfully"})

    @app.route(f"{prefix}/contracts/<int:contract_id>/complete", methods=["PUT"], endpoint="contracts_complete")
    @roles_required(Role.ADMIN)
    def contracts_complete(contract_id: int):
        return jsonify(dump(ContractOut, container.contract_service.complete(current_user(), contract_id)))

    @app.route(f"{prefix}/contracts/user/my", methods=["GET"], endpoint="contracts_my")
    @token_required
    def contracts_my():
        filters = parse_args(ContractFilterQuery)
        page = container.contract_service.list_mine(
            current_user(),
            PageQuery.from_args(request.args, default_sort="createdAt"),
            status=filters.status,
        )
        return jsonify(_page_json(page))

    @app.route(f"{prefix}/contracts/user/<int:contract_id>/confirm", methods=["PUT"], endpoint="contracts_confirm")
    @token_required
    def contracts_confirm(contract_id: int):
        return jsonify(dump(ContractOut, container.contract_service.confirm(current_user(), contract_id)))

    @app.route(f"{prefix}/contracts/user/<int:contract_id>/reject", methods=["PUT"], endpoint="contracts_reject")
    @token_required
    def contracts_reject(contract_id: int):
        return jsonify(dump(ContractOut, container.contract_service.reject(current_user(), contract_id)))
