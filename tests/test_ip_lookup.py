import httpx

from tests.fakes import ipify_client, run


def test_returns_ip_from_json_body():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"ip": "2001:db8::1"})

    assert run(ipify_client(handler).get_ip_address()) == "2001:db8::1"
    assert seen == ["https://api64.ipify.org?format=json"]


def test_non_2xx_maps_to_none():
    client = ipify_client(lambda request: httpx.Response(503, text="busy"))
    assert run(client.get_ip_address()) is None


def test_malformed_body_maps_to_none():
    client = ipify_client(lambda request: httpx.Response(200, text="<html>nope</html>"))
    assert run(client.get_ip_address()) is None


def test_missing_ip_field_maps_to_none():
    client = ipify_client(lambda request: httpx.Response(200, json={"address": "1.2.3.4"}))
    assert run(client.get_ip_address()) is None


def test_network_error_maps_to_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route to host", request=request)

    assert run(ipify_client(handler).get_ip_address()) is None
