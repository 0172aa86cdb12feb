from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.auth import roles_required, token_required
from ..api.payload import dump, dump_many, parse_args, parse_body
from ..common.pagination import PageQuery
from ..core.enums import Role
from .schemas import DeviceIn, DeviceListQuery, DeviceOut, DeviceTypeCreateIn, DeviceTypeOut, DeviceTypeUpdateIn
from .service import DeviceData


def register(app: Flask, container) -> None:
    prefix = app.config["API_PREFIX"]

    @app.route(f"{prefix}/devices", methods=["GET"], endpoint="devices_search")
    @token_required
    def devices_search():
        filters = parse_args(DeviceListQuery)
        page = container.device_service.search(
            PageQuery.from_args(request.args, default_sort="createdAt"),
            type_code=filters.type_code,
        )
        return jsonify({"devices": dump_many(DeviceOut, page.items), "pagination": page.meta()})

    @app.route(f"{prefix}/devices/all", methods=["GET"], endpoint="devices_all")
    @token_required
    def devices_all():
        filters = parse_args(DeviceListQuery)
        devices = container.device_service.list_simple(unassigned_only=filters.unassigned_only)
        return jsonify(dump_many(DeviceOut, devices))

    @app.route(f"{prefix}/devices/user/<int:user_id>", methods=["GET"], endpoint="devices_held_by")
    @token_required
    def devices_held_by(user_id: int):
        return jsonify(dump_many(DeviceOut, container.device_service.held_by(user_id)))

    @app.route(f"{prefix}/devices/<int:device_id>", methods=["GET"], endpoint="devices_get")
    @token_required
    def devices_get(device_id: int):
        return jsonify(dump(DeviceOut, container.device_service.get(device_id)))

    @app.route(f"{prefix}/devices", methods=["POST"], endpoint="devices_create")
    @roles_required(Role.ADMIN)
    def devices_create():
        body = parse_body(DeviceIn)
        device = container.device_service.create(DeviceData(**body.model_dump()))
        return jsonify(dump(DeviceOut, device)), 201

    @app.route(f"{prefix}/devices/<int:device_id>", methods=["PUT"], endpoint="devices_update")
    @roles_required(Role.ADMIN)
    def devices_update(device_id: int):
        body = parse_body(DeviceIn)
        device = container.device_service.update(device_id, DeviceData(**body.model_dump()))
        return jsonify(dump(DeviceOut, device))

    @app.route(f"{prefix}/devices/<int:device_id>", methods=["DELETE"], endpoint="devices_delete")
    @roles_required(Role.ADMIN)
    def devices_delete(device_id: int):
        container.device_service.delete(device_id)
        return jsonify({"message": "Device deleted successfully"})

    @app.route(f"{prefix}/device-types", methods=["GET"], endpoint="device_types_search")
    @token_required
    def device_types_search():
        page = container.device_type_service.search(PageQuery.from_args(request.args, default_sort="name", default_desc=False))
        return jsonify({"deviceTypes": dump_many(DeviceTypeOut, page.items), "pagination": page.meta()})

    @app.route(f"{prefix}/device-types/all", methods=["GET"], endpoint="device_types_all")
    @token_required
    def device_types_all():
        return jsonify(dump_many(DeviceTypeOut, container.device_type_service.list_active()))

    @app.route(f"{prefix}/device-types", methods=["POST"], endpoint="device_types_create")
    @roles_required(Role.ADMIN)
    def device_types_create():
        body = parse_body(DeviceTypeCreateIn)
        device_type = container.device_type_service.create(
            name=body.name,
            code=body.code,
            description=body.description,
        )
        return jsonify(dump(DeviceTypeOut, device_type)), 201

    @app.route(f"{prefix}/device-types/<int:device_type_id>", methods=["PUT"], endpoint="device_types_update")
    @roles_required(Role.ADMIN)
    def device_types_update(device_type_id: int):
        body = parse_body(DeviceTypeUpdateIn)
        device_type = container.device_type_service.update(device_type_id, **body.model_dump())
        return jsonify(dump(DeviceTypeOut, device_type))

    @app.route(f"{prefix}/device-types/<int:device_type_id>", methods=["DELETE"], endpoint="device_types_delete")
    @roles_required(Role.ADMIN)
    def device_types_delete(device_type_id: int):
        container.device_type_service.delete(device_type_id)
        return jsonify({"message": "Device type deleted successfully"})
