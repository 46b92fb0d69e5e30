import importlib
import json

import pytest

import cli.main
from cli.main import build_parser, main
from instances import InstanceStore

from conftest import MS_TOKEN_BODY


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MCT_AUTH_CACHE_FILE", str(tmp_path / "msa-auth.json"))
    monkeypatch.setenv("MCT_INSTANCES_DIR", str(tmp_path / "instances"))
    # Keep pytest's own log handlers on the root logger
    monkeypatch.setattr(importlib.import_module("cli.main"), "setup_logging", lambda *args, **kwargs: None)


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_create_and_list_instances(tmp_path, capsys):
    main(["instances", "create", "Fabric Pack", "--version", "1.20.1", "--loader", "fabric", "--max-ram", "6144"])
    main(["instances", "create", "Fabric Pack"])
    main(["instances", "list"])

    out = capsys.readouterr().out
    assert "Created instance 'Fabric Pack'" in out
    assert "Fabric Pack" in out

    store = InstanceStore(tmp_path / "instances")
    assert sorted(i.path.name for i in store) == ["Fabric Pack", "Fabric Pack (1)"]
    first = store.by_name("Fabric Pack")
    assert {i.minecraft_version for i in first} == {"1.20.1", ""}


def test_invalid_ram_exits(capsys):
    with pytest.raises(SystemExit) as exit_info:
        main(["instances", "create", "Bad", "--min-ram", "8192", "--max-ram", "1024"])

    assert exit_info.value.code == 1
    assert "ERROR" in capsys.readouterr().out


def test_login_without_client_id(monkeypatch, capsys):
    monkeypatch.delenv("MCT_CLIENT_ID", raising=False)

    with pytest.raises(SystemExit) as exit_info:
        main(["login"])

    assert exit_info.value.code == 1
    assert "No client id configured" in capsys.readouterr().out


def test_status_and_logout(tmp_path, capsys):
    cache_file = tmp_path / "msa-auth.json"
    cache_file.write_text(json.dumps(MS_TOKEN_BODY))

    main(["status"])
    assert "Refreshable" in capsys.readouterr().out

    main(["logout"])
    assert not cache_file.exists()
