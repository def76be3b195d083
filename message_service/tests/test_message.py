import inspect

from fastapi.testclient import TestClient

from message_service.config import ConfigProvider
from message_service.main import create_app


def _client(tmp_path, environ=None):
    provider = ConfigProvider(
        config_file=tmp_path / "application.env", environ=environ or {}
    )
    return TestClient(create_app(provider))


def test_unset_message_uses_default(tmp_path):
    client = _client(tmp_path)
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "message:n/a"
    assert r.headers["content-type"].startswith("text/plain")


def test_message_from_environment(tmp_path):
    client = _client(tmp_path, {"MESSAGE": "hello"})
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "message:hello"


def test_empty_message(tmp_path):
    client = _client(tmp_path, {"MESSAGE": ""})
    assert client.get("/").text == "message:"


def test_repeated_requests_are_identical(tmp_path):
    client = _client(tmp_path, {"MESSAGE": "hello"})
    first = client.get("/")
    second = client.get("/")
    assert first.status_code == second.status_code == 200
    assert first.text == second.text == "message:hello"


def test_refresh_picks_up_file_change(tmp_path):
    config_file = tmp_path / "application.env"
    config_file.write_text("message=hello\n")
    client = TestClient(create_app(ConfigProvider(config_file=config_file, environ={})))
    assert client.get("/").text == "message:hello"

    config_file.write_text("message=world\n")
    r = client.post("/actuator/refresh")
    assert r.status_code == 200
    assert r.json() == {"changed": ["message"]}
    assert client.get("/").text == "message:world"


def test_refresh_picks_up_environment_change(tmp_path):
    environ = {"MESSAGE": "hello"}
    client = _client(tmp_path, environ)
    assert client.get("/").text == "message:hello"

    environ["MESSAGE"] = "world"
    # not visible until refreshed
    assert client.get("/").text == "message:hello"
    client.post("/actuator/refresh")
    assert client.get("/").text == "message:world"


def test_refresh_without_changes(tmp_path):
    client = _client(tmp_path, {"MESSAGE": "hello"})
    r = client.post("/actuator/refresh")
    assert r.status_code == 200
    assert r.json() == {"changed": []}


def test_only_get_root_is_routed(tmp_path):
    client = _client(tmp_path, {"MESSAGE": "hello"})
    assert client.post("/").status_code == 405
    assert client.get("/other").status_code == 404


def test_health(tmp_path):
    client = _client(tmp_path)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_refresh_endpoint_runs_off_the_event_loop(tmp_path):
    app = create_app(ConfigProvider(config_file=tmp_path / "application.env", environ={}))
    route = next(r for r in app.routes if getattr(r, "path", None) == "/actuator/refresh")
    assert not inspect.iscoroutinefunction(route.endpoint)


def test_package_app_is_built_on_first_access(monkeypatch):
    import message_service
    from message_service import main as main_module

    assert not hasattr(main_module, "app")
    monkeypatch.setattr(message_service, "_app", None)
    built = message_service.app
    assert message_service.app is built
    assert built.state.config is not None
