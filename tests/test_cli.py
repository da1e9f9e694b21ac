"""
Tests for CLI commands: sidecar render/check/prestop and global options.
"""

import json
import textwrap
from pathlib import Path

import yaml
from click.testing import CliRunner

from agent_inject.main import cli


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "agent-inject.yml"
    path.write_text(textwrap.dedent(content))
    return path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Vault Agent Inject" in result.output
        assert "sidecar" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestRenderCommand:
    def test_render_yaml(self, config_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_yml), "sidecar", "render"])
        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(result.output)
        assert doc["name"] == "vault-agent"
        assert doc["env"] == [{"name": "VAULT_LOG_LEVEL", "value": "debug"}]
        names = [m["name"] for m in doc["volumeMounts"]]
        assert names == ["vault-secrets", "app-token-x7k2p", "vault-config", "vault-tls-secrets"]
        assert "sleep 10" in doc["lifecycle"]["preStop"]["exec"]["command"][2]

    def test_render_json_with_extra_env(self, config_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "--config", str(config_yml), "sidecar", "render", "--json",
            "--env", "VAULT_CONFIG=e30=",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["env"][-1] == {"name": "VAULT_CONFIG", "value": "e30="}
        assert data["resources"]["limits"] == {"cpu": "1", "memory": "256Mi"}

    def test_render_bad_env_option(self, config_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "--config", str(config_yml), "sidecar", "render", "--env", "NOEQUALS",
        ])
        assert result.exit_code == 2

    def test_render_invalid_quantity(self, tmp_path: Path):
        config = _write(tmp_path, """\
            service_account_name: sa
            limits_mem: lots
        """)
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "sidecar", "render"])
        assert result.exit_code == 1
        assert "limits.memory" in result.output
        assert "lots" in result.output

    def test_render_invalid_quantity_json(self, tmp_path: Path):
        config = _write(tmp_path, """\
            service_account_name: sa
            requests_cpu: "-1x"
        """)
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "sidecar", "render", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert "requests.cpu" in data["error"]

    def test_render_exponent_out_of_range(self, tmp_path: Path):
        config = _write(tmp_path, """\
            service_account_name: sa
            limits_cpu: "1e99999999999"
        """)
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "sidecar", "render"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, ArithmeticError)
        assert "limits.cpu" in result.output

    def test_render_missing_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        result = runner.invoke(cli, ["sidecar", "render"])
        assert result.exit_code == 1
        assert "No agent-inject.yml" in result.output


class TestCheckCommand:
    def test_check_ok(self, config_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_yml), "sidecar", "check"])
        assert result.exit_code == 0, result.output
        assert "Configuration is valid" in result.output
        assert "cpu=1" in result.output
        assert "grace 10s" in result.output

    def test_check_json(self, config_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_yml), "sidecar", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["revoke_on_shutdown"] is True
        assert len(data["volume_mounts"]) == 4

    def test_check_unset_resources(self, tmp_path: Path):
        config = _write(tmp_path, """\
            service_account_name: sa
            limits_cpu: ""
            limits_mem: ""
        """)
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "sidecar", "check"])
        assert result.exit_code == 0
        assert "Limits: unset" in result.output

    def test_check_invalid(self, tmp_path: Path):
        config = _write(tmp_path, """\
            service_account_name: sa
            limits_cpu: abc
        """)
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "sidecar", "check"])
        assert result.exit_code == 1
        assert "limits.cpu" in result.output


class TestPrestopCommand:
    def test_prestop(self, config_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config_yml), "sidecar", "prestop"])
        assert result.exit_code == 0
        assert result.output.strip() == (
            "/bin/sleep 10 && /bin/vault token revoke "
            "-address=https://vault.vault.svc:8200 -ca-cert=/vault/tls/ca.crt -self"
        )

    def test_prestop_disabled(self, tmp_path: Path):
        config = _write(tmp_path, "service_account_name: sa\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "sidecar", "prestop"])
        assert result.exit_code == 0
        assert "No pre-stop hook" in result.output
