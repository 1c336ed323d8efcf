"""Unit tests for the command line entry points."""

import json
import pytest
from pathlib import Path
from unittest.mock import patch

from interlinx_bootstrap.exceptions import ConfigurationError, FetchUnauthorizedError
from interlinx_bootstrap.install.orchestrator import (
    ArtifactKind,
    BootstrapResult,
    InstalledArtifact,
)
from interlinx_bootstrap.main import build_parser, check_privileges, main, main_single


@pytest.fixture
def result():
    """A successful dual-artifact result."""
    return BootstrapResult(
        controller=InstalledArtifact(
            ArtifactKind.CONTROLLER, "v1.4.0", Path("/opt/interlinx-controller-v1.4.0")
        ),
        agent=InstalledArtifact(
            ArtifactKind.AGENT, "v1.0.0", Path("agent-v1.0.0-linux.run")
        ),
    )


@pytest.fixture
def mock_bootstrap(result):
    """Patch out privilege checks and the bootstrap run itself."""
    with patch("interlinx_bootstrap.main.check_privileges"), \
            patch("interlinx_bootstrap.main.run_bootstrap", return_value=result) as mock_run:
        yield mock_run


class TestBuildParser:
    """Tests for build_parser."""

    def test_dual_options(self):
        args = build_parser(dual=True).parse_args([
            "--token", "ghp_x", "--controller-version", "v1.4.0", "--agent-version", "v1.0.0",
        ])
        assert args.token == "ghp_x"
        assert args.controller_version == "v1.4.0"
        assert args.agent_version == "v1.0.0"

    def test_single_has_no_agent_option(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser(dual=False).parse_args(["--agent-version", "v1.0.0"])
        assert exc_info.value.code == 2


class TestMain:
    """Tests for main and main_single."""

    def test_defaults_to_latest(self, mock_bootstrap, capsys):
        """Test no version flags means latest for both artifacts."""
        assert main(["--token", "ghp_x"]) == 0

        kwargs = mock_bootstrap.call_args.kwargs
        assert kwargs["token"] == "ghp_x"
        assert kwargs["controller_version"] is None
        assert kwargs["agent_version"] is None
        assert kwargs["include_agent"] is True

        output = capsys.readouterr().out
        assert "Interlinx Controller & Agent downloaded successfully!" in output
        assert "Controller Location: /opt/interlinx-controller-v1.4.0" in output
        assert "Bootstrap installation complete!" in output

    def test_versions_passed_through(self, mock_bootstrap):
        """Test explicit versions reach the run."""
        main(["--controller-version", "v1.4.0", "--agent-version", "v1.0.0"])

        kwargs = mock_bootstrap.call_args.kwargs
        assert kwargs["controller_version"] == "v1.4.0"
        assert kwargs["agent_version"] == "v1.0.0"

    def test_deprecated_version_flag(self, mock_bootstrap, capsys):
        """Test --version still selects the controller version, with a warning."""
        assert main(["--version", "v1.3.0"]) == 0

        assert mock_bootstrap.call_args.kwargs["controller_version"] == "v1.3.0"
        assert "--version flag is deprecated" in capsys.readouterr().out

    def test_controller_version_beats_deprecated_flag(self, mock_bootstrap):
        """Test --controller-version wins when both are given."""
        main(["--version", "v1.3.0", "--controller-version", "v1.4.0"])

        assert mock_bootstrap.call_args.kwargs["controller_version"] == "v1.4.0"

    def test_single_variant(self, mock_bootstrap, result):
        """Test interlinx-install runs the controller only."""
        result.agent = None

        assert main_single(["--version", "v1.4.0"]) == 0

        kwargs = mock_bootstrap.call_args.kwargs
        assert kwargs["controller_version"] == "v1.4.0"
        assert kwargs["include_agent"] is False

    def test_install_dir_override(self, mock_bootstrap, tmp_path):
        """Test --install-dir reaches the settings."""
        main(["--install-dir", str(tmp_path)])

        settings = mock_bootstrap.call_args.args[0]
        assert settings.install_dir == str(tmp_path)

    def test_failure_exit_code(self, mock_bootstrap, capsys):
        """Test installer errors exit 1 with a message on stderr."""
        mock_bootstrap.side_effect = FetchUnauthorizedError("controller tarball", 401)

        assert main([]) == 1

        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "check your GitHub token" in err

    def test_interrupt(self, mock_bootstrap):
        """Test Ctrl+C exits 130."""
        mock_bootstrap.side_effect = KeyboardInterrupt

        assert main([]) == 130

    def test_bad_settings_file(self, tmp_path, capsys):
        """Test an unreadable settings file fails before any work."""
        with patch("interlinx_bootstrap.main.run_bootstrap") as mock_run:
            assert main(["--config", str(tmp_path / "missing.json")]) == 1

        mock_run.assert_not_called()
        assert "Settings file not found" in capsys.readouterr().err

    def test_wrong_type_in_settings_file(self, tmp_path, capsys):
        """Test a mistyped setting exits 1 with an error instead of a traceback."""
        config = tmp_path / "bootstrap.json"
        config.write_text(json.dumps({"controller_repo": 5}))

        with patch("interlinx_bootstrap.main.run_bootstrap") as mock_run:
            assert main_single(["--config", str(config)]) == 1

        mock_run.assert_not_called()
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "controller_repo" in err

    def test_quoted_timeout_in_settings_file(self, mock_bootstrap, tmp_path):
        """Test a timeout written as a string reaches the run as an int."""
        config = tmp_path / "bootstrap.json"
        config.write_text(json.dumps({"timeout": "30"}))

        assert main(["--config", str(config)]) == 0

        settings = mock_bootstrap.call_args.args[0]
        assert settings.timeout == 30
        assert isinstance(settings.timeout, int)


class TestCheckPrivileges:
    """Tests for check_privileges."""

    def test_root_always_allowed(self, tmp_path):
        with patch("interlinx_bootstrap.main.os.geteuid", return_value=0, create=True), \
                patch("interlinx_bootstrap.main.os.access") as mock_access:
            check_privileges(tmp_path / "opt")
        mock_access.assert_not_called()

    def test_writable_parent(self, tmp_path):
        """Test a missing root under a writable directory is accepted."""
        with patch("interlinx_bootstrap.main.os.geteuid", return_value=1000, create=True):
            check_privileges(tmp_path / "not" / "yet" / "created")

    def test_not_writable(self, tmp_path):
        with patch("interlinx_bootstrap.main.os.geteuid", return_value=1000, create=True), \
                patch("interlinx_bootstrap.main.os.access", return_value=False):
            with pytest.raises(ConfigurationError, match="must be run as root"):
                check_privileges(tmp_path)
