import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from conftest import ok, read_config, write_config
from zdock_api.core.config import Settings
from zdock_api.domain.container import ExecResult
from zdock_api.domain.errors import CommandFailed, CreationTimedOut
from zdock_api.domain.network import NetworkInfo
from zdock_api.main import create_app
from zdock_api.services.liveness import ProcessLivenessProbe


@pytest.fixture
def meminfo(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("MemTotal:       16318480 kB\nMemFree:         1234 kB\n")
    return path


@pytest.fixture
def app(state_root, meminfo, tmp_path, monkeypatch):
    monkeypatch.setattr(ProcessLivenessProbe, "is_running", lambda self, pid: pid == "4242")
    settings = Settings(
        CONTAINER_STATE_DIR=state_root,
        ZDOCKER_ROOT=tmp_path / "zdocker-root",
        RUNTIME_BINARY="/nonexistent/zdocker",
        MEMINFO_PATH=meminfo,
        CREATE_POLL_TIMEOUT_SECONDS=0.05,
    )
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_containers_repairs_dead_ones(client, state_root):
    write_config(state_root, "web", id="abc123", pid="4242", portMapping=["8080:80"])
    write_config(state_root, "old", id="def456", pid="100")
    (state_root / "broken").mkdir()
    (state_root / "broken" / "config.json").write_text("{")

    response = client.get("/api/v1/containers")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [c["name"] for c in data] == ["old", "web"]
    assert data[0]["status"] == "exited"
    assert data[0]["pid"] == ""
    assert data[1]["port_mapping"] == "8080:80"
    assert read_config(state_root, "old")["status"] == "exited"


def test_get_container_by_id_and_name(client, state_root):
    write_config(state_root, "web", id="abc123", pid="4242")

    assert client.get("/api/v1/containers/abc123").json()["data"]["name"] == "web"
    assert client.get("/api/v1/containers/web").json()["data"]["id"] == "abc123"


def test_get_unknown_container_is_404(client):
    response = client.get("/api/v1/containers/ghost")

    assert response.status_code == 404
    assert "ghost" in response.json()["error"]


def test_create_container(client, app, state_root):
    write_config(state_root, "web", id="abc123", pid="4242")
    app.state.runtime.runner.run = AsyncMock(return_value=ok())

    response = client.post(
        "/api/v1/containers",
        json={"image": "busybox", "command": "top", "name": "web", "detach": True},
    )

    assert response.status_code == 200
    assert response.json()["data"]["id"] == "abc123"


def test_create_container_requires_image(client):
    response = client.post("/api/v1/containers", json={"command": "top"})

    assert response.status_code == 400
    assert "image" in response.json()["error"]


def test_create_container_timeout_is_504(client, app):
    app.state.runtime.create = AsyncMock(side_effect=CreationTimedOut("web", 0.05))

    response = client.post("/api/v1/containers", json={"image": "busybox", "command": "top", "name": "web"})

    assert response.status_code == 504


def test_stop_failure_returns_output(client, app):
    app.state.runtime.stop = AsyncMock(side_effect=CommandFailed("stop", "no such container", 1))

    response = client.post("/api/v1/containers/stop/web")

    assert response.status_code == 500
    assert response.json()["output"] == "no such container"


def test_remove_and_logs(client, app):
    app.state.runtime.remove = AsyncMock()
    app.state.runtime.logs = AsyncMock(return_value="hello\n")

    assert client.delete("/api/v1/containers/web").json() == {"message": "Container web removed"}
    assert client.get("/api/v1/containers/logs/web").json() == {"data": "hello\n"}
    app.state.runtime.remove.assert_awaited_once_with("web")


def test_exec(client, app):
    app.state.runtime.exec = AsyncMock(return_value=ExecResult(output="boom\n", exit_code=2))

    response = client.post("/api/v1/containers/web/exec", json={"command": ["sh", "-c", "exit 2"]})

    assert response.json() == {"data": {"output": "boom\n", "exit_code": 2}}


def test_exec_with_missing_runtime_is_an_error(client):
    response = client.post("/api/v1/containers/web/exec", json={"command": ["ls"]})

    assert response.status_code == 500
    assert "Could not invoke" in response.json()["error"]


def test_start_acknowledges(client, state_root):
    write_config(state_root, "web", pid="4242")

    response = client.post("/api/v1/containers/web/start")

    assert response.json() == {"message": "Container web is running"}


def test_networks_fall_back_to_default_without_runtime(client):
    response = client.get("/api/v1/networks")

    assert response.json() == {"data": [{"name": "bridge", "driver": "bridge", "subnet": "172.17.0.0/16"}]}


def test_create_network(client, app):
    app.state.runtime.network_create = AsyncMock(return_value=NetworkInfo("testnet", "bridge", "10.0.0.0/24"))

    response = client.post("/api/v1/networks", json={"name": "testnet", "driver": "bridge", "subnet": "10.0.0.0/24"})

    assert response.json()["data"]["name"] == "testnet"


def test_system_info_and_version(client, tmp_path):
    info = client.get("/api/v1/system/info").json()["data"]
    version = client.get("/api/v1/system/version").json()["data"]

    assert info["memory"] == "16318480 kB"
    assert info["zdocker_root"] == str(tmp_path / "zdocker-root")
    assert info["cpus"] >= 1
    assert version["version"] == "unknown"
    assert version["api_version"] == "1.0"


def test_error_body_is_documented(client):
    schema = client.get("/openapi.json").json()

    responses = schema["paths"]["/api/v1/containers/{container_id}"]["get"]["responses"]
    assert responses["404"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
    assert set(schema["components"]["schemas"]["ErrorResponse"]["properties"]) == {"error", "output"}


def test_validation_error_uses_error_body(client):
    response = client.post("/api/v1/containers/web/exec", json={"command": []})

    assert response.status_code == 400
    assert response.json()["output"] == ""
