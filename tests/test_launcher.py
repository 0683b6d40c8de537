"""Tests for process launching and the session registry."""

import subprocess
import threading
from unittest.mock import MagicMock, Mock, patch

import pytest

from core.exceptions import LaunchError
from core.registry import SessionRegistry
from logs.log_manager import LogStreamer
from logs.run_log import RunLog
from pods.launcher import ProcessLauncher, logs_command, port_forward_command
from pods.pod import Session


def fake_process(running=True, lines=()):
    process = MagicMock()
    process.poll.return_value = None if running else 0
    process.stdout.readline.side_effect = [f"{line}\n" for line in lines] + [""]
    return process


class TestCommands:
    def test_port_forward_command(self):
        assert port_forward_command("shop", "cart-1-2", "3000", "8080") == [
            "kubectl", "port-forward", "--namespace", "shop", "cart-1-2", "3000:8080"
        ]

    def test_logs_command_with_context(self):
        assert logs_command("shop", "cart-1-2", kubectl="k", context="dev") == [
            "k", "logs", "--namespace", "shop", "cart-1-2", "-f", "--context", "dev"
        ]

    def test_command_without_namespace(self):
        assert port_forward_command(None, "cart-1-2", "1", "2") == ["kubectl", "port-forward", "cart-1-2", "1:2"]


class TestProcessLauncher:
    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            ProcessLauncher(SessionRegistry(), mode="tmux")

    def test_inline_registers_session(self):
        registry = SessionRegistry()
        process = fake_process()
        with patch("subprocess.Popen", return_value=process) as mock_popen, \
                patch.object(LogStreamer, "start") as mock_start:
            session = ProcessLauncher(registry).start_process_stream(["kubectl", "logs"], "k8s - api:3000", kind="logs")

        assert mock_popen.call_args.args[0] == ["kubectl", "logs"]
        mock_start.assert_called_once()
        assert registry.sessions == [session]
        assert session.kind == "logs"
        assert session.is_running()

    def test_inline_missing_binary(self):
        registry = SessionRegistry()
        with patch("subprocess.Popen", side_effect=FileNotFoundError("kubectl")):
            with pytest.raises(LaunchError):
                ProcessLauncher(registry).start_process_stream(["kubectl"], "label")

        assert registry.sessions == []

    def test_window_mode_uses_shell(self):
        registry = SessionRegistry()
        launcher = ProcessLauncher(registry, mode="window")
        with patch("subprocess.Popen") as mock_popen:
            session = launcher.start_process_stream(["kubectl", "port-forward", "pod", "1:2"], "k8s - api:1")

        assert mock_popen.call_args.kwargs == {"shell": True}
        assert "kubectl port-forward pod 1:2" in mock_popen.call_args.args[0]
        assert session.detached
        assert registry.sessions == [session]

    def test_window_mode_without_terminal(self):
        launcher = ProcessLauncher(SessionRegistry(), mode="window")
        with patch.object(launcher, "_get_terminal_command", return_value=""):
            with pytest.raises(LaunchError):
                launcher.start_process_stream(["kubectl"], "label")


class TestLogStreamer:
    def test_lines_are_prefixed(self):
        lines = []
        done = threading.Event()
        process = fake_process(lines=["hello", "", "world"])

        def sink(line):
            lines.append(line)
            if len(lines) == 2:
                done.set()

        streamer = LogStreamer(process, "api", sink=sink)
        streamer.start()
        assert done.wait(timeout=2)
        streamer.stop()

        assert lines == ["[api] hello", "[api] world"]

    def test_no_stdout(self):
        process = Mock(stdout=None)
        streamer = LogStreamer(process, "api", sink=Mock())
        streamer.start()
        streamer.stop()

        assert not streamer.is_streaming


class TestSessionRegistry:
    def test_running_sessions(self):
        registry = SessionRegistry()
        running = Session("a", ["kubectl"], process=fake_process(running=True))
        exited = Session("b", ["kubectl"], process=fake_process(running=False))
        registry.add_session(running)
        registry.add_session(exited)

        assert registry.running_sessions() == [running]

    def test_stop_all_terminates_running(self):
        registry = SessionRegistry()
        process = fake_process(running=True)
        registry.add_session(Session("a", ["kubectl"], process=process))
        window = Session("w", ["kubectl"])
        registry.add_session(window)

        assert registry.stop_all() == 1
        process.terminate.assert_called_once()
        process.wait.assert_called_once_with(timeout=5)
        assert registry.sessions == [window]

    def test_stop_kills_after_timeout(self):
        process = fake_process(running=True)
        process.wait.side_effect = [subprocess.TimeoutExpired("kubectl", 5), 0]

        Session("a", ["kubectl"], process=process).stop()

        process.kill.assert_called_once()

    def test_run_logs_are_kept(self):
        registry = SessionRegistry()
        run_log = RunLog(title="run", echo=False)
        registry.add_run_log(run_log)
        run_log.log("Running: kubectl get pods")

        assert registry.run_logs[0].lines == ["Running: kubectl get pods"]


def test_run_log_writes_file(tmp_path, capsys):
    log_file = tmp_path / "logs" / "run.log"
    run_log = RunLog(title="run", log_file=str(log_file))

    run_log.log("first")
    run_log.log("second")

    assert list(run_log) == ["first", "second"]
    content = log_file.read_text().splitlines()
    assert content[0].endswith("[run] first")
    assert "] second" in capsys.readouterr().out
