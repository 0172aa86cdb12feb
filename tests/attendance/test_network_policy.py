from __future__ import annotations

from hrm_portal.attendance.network import OfficeNetworkPolicy, client_ip


def test_disabled_policy_allows_everything():
    assert OfficeNetworkPolicy(enabled=False).is_allowed("8.8.8.8")


def test_exact_ip_and_subnet_matches():
    policy = OfficeNetworkPolicy(enabled=True, allowed_ips=["127.0.0.1"], allowed_subnets=["192.168.0.0/16"])
    assert policy.is_allowed("127.0.0.1")
    assert policy.is_allowed("192.168.10.20")
    assert not policy.is_allowed("172.16.0.1")


def test_garbage_address_is_refused():
    policy = OfficeNetworkPolicy(enabled=True, allowed_subnets=["10.0.0.0/8"])
    assert not policy.is_allowed("not-an-ip")
    assert not policy.is_allowed("")


def test_client_ip_prefers_forwarded_header():
    headers = {"X-Forwarded-For": "10.0.0.5, 172.16.0.1", "X-Real-IP": "10.0.0.9"}
    assert client_ip(headers, "127.0.0.1") == "10.0.0.5"
    assert client_ip({"X-Real-IP": "10.0.0.9"}, "127.0.0.1") == "10.0.0.9"
    assert client_ip({}, "127.0.0.1") == "127.0.0.1"
