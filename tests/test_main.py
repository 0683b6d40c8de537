"""Tests for the command-line entry point."""

import os
from unittest.mock import patch

import pytest

from core import main as main_module
from core.exceptions import ConfigurationError
from models.models import Settings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("KUBEFORWARD_CONFIG", str(tmp_path))
    return tmp_path


def test_flags_override_config(isolated_config):
    (isolated_config / "config.yml").write_text("namespace: shop\nlaunch_mode: window\n")
    args = main_module.build_parser().parse_args(["--context", "dev", "--launch-mode", "inline", "--base-port", "4000"])

    settings = main_module.load_settings(args)

    assert settings.namespace == "shop"
    assert settings.context == "dev"
    assert settings.launch_mode == "inline"
    assert settings.base_local_port == 4000


def test_all_namespaces_flag():
    args = main_module.build_parser().parse_args(["-A"])

    assert main_module.load_settings(args).namespace == "--all-namespaces"


def test_bad_base_port_is_rejected():
    args = main_module.build_parser().parse_args(["--base-port", "99999"])

    with pytest.raises(ConfigurationError):
        main_module.load_settings(args)


def test_main_exits_on_configuration_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main_module.main(["--base-port", "abc"])

    assert exc.value.code == 2
    assert "Configuration error" in capsys.readouterr().err


def test_save_config(isolated_config):
    main_module.main(["--namespace", "billing", "--save-config"])

    assert "namespace: billing" in (isolated_config / "config.yml").read_text()


def test_main_runs_tui():
    with patch.object(main_module, "KubeForwardTUI") as mock_tui:
        main_module.main([])

    app = mock_tui.call_args.args[0]
    assert isinstance(app.settings, Settings)
    assert app.launcher.registry is app.registry
    mock_tui.return_value.run.assert_called_once()


def test_extend_path(monkeypatch):
    monkeypatch.setenv("PATH", "/usr/bin")

    main_module.extend_path()

    parts = os.environ["PATH"].split(os.pathsep)
    assert parts.count("/usr/bin") == 1
    assert "/opt/homebrew/bin" in parts


def test_config_info_flag(isolated_config, capsys):
    with patch.object(main_module, "KubeForwardTUI") as mock_tui:
        main_module.main(["--config-info"])

    out = capsys.readouterr().out
    assert f"config_path: {isolated_config / 'config.yml'}" in out
    assert "config_exists: False" in out
    mock_tui.assert_not_called()
