import os
import shlex
import subprocess
import sys
from typing import List, Optional

from core.exceptions import LaunchError
from logs.log_manager import LogStreamer
from pods.pod import Session

LAUNCH_MODES = ("inline", "window")


def port_forward_command(namespace: Optional[str], pod_name: str, local_port: str, service_port: str,
                         kubectl: str = "kubectl", context: Optional[str] = None) -> List[str]:
    cmd = [kubectl, "port-forward"]
    if namespace:
        cmd += ["--namespace", namespace]
    cmd += [pod_name, f"{local_port}:{service_port}"]
    if context:
        cmd += ["--context", context]
    return cmd


def logs_command(namespace: Optional[str], pod_name: str,
                 kubectl: str = "kubectl", context: Optional[str] = None) -> List[str]:
    cmd = [kubectl, "logs"]
    if namespace:
        cmd += ["--namespace", namespace]
    cmd += [pod_name, "-f"]
    if context:
        cmd += ["--context", context]
    return cmd


class ProcessLauncher:
    def __init__(self, registry, mode: str = "inline"):
        if mode not in LAUNCH_MODES:
            raise ValueError(f"Unknown launch mode: {mode}")
        self.registry = registry
        self.mode = mode

    def start_process_stream(self, command: List[str], label: str, kind: str = "forward") -> Session:
        if self.mode == "window":
            session = self._start_in_window(command, label, kind)
        else:
            session = self._start_inline(command, label, kind)
        self.registry.add_session(session)
        return session

    def _start_inline(self, command: List[str], label: str, kind: str) -> Session:
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise LaunchError(f"Failed to start {label}: {e}") from e

        streamer = LogStreamer(process, label)
        streamer.start()
        return Session(label, command, process=process, streamer=streamer, kind=kind)

    def _start_in_window(self, command: List[str], label: str, kind: str) -> Session:
        terminal_cmd = self._get_terminal_command(shlex.join(command), label)
        if not terminal_cmd:
            raise LaunchError("Could not determine how to open new terminal window")
        try:
            subprocess.Popen(terminal_cmd, shell=True)
        except OSError as e:
            raise LaunchError(f"Failed to open terminal for {label}: {e}") from e
        return Session(label, command, kind=kind)

    def _get_terminal_command(self, cmd: str, title: str) -> str:
        escaped_cmd = cmd.replace('"', '\\"')
        escaped_title = title.replace('"', '\\"')

        if sys.platform == "win32":
            return f'''start wt -w 0 new-tab --title "{escaped_title}" powershell -NoExit -Command "{escaped_cmd}"'''

        elif sys.platform == "darwin":
            if os.path.exists("/Applications/iTerm.app"):
                return f"""
    osascript -e 'tell application "iTerm"
        activate
        set newWindow to (create window with default profile)
        tell current session of newWindow
            write text "{escaped_cmd}"
            set name to "{escaped_title}"
        end tell
    end tell'
    """
            return f"""
    osascript -e 'tell application "Terminal"
        activate
        do script "{escaped_cmd}"
    end tell'
    """
        else:
            return f"""
    bash -c '
    if command -v gnome-terminal &>/dev/null; then
        gnome-terminal --title="{escaped_title}" -- bash -c "{escaped_cmd}; exec bash" &
    elif command -v konsole &>/dev/null; then
        konsole -p tabtitle="{escaped_title}" -e bash -c "{escaped_cmd}; exec bash" &
    elif command -v xterm &>/dev/null; then
        xterm -title "{escaped_title}" -geometry 132x45 -e "{escaped_cmd}" &
    else
        echo "No compatible terminal found" >&2
    fi
    '
    """
