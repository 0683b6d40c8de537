import subprocess
from typing import List, Optional


class Session:
    """A launched forward or log process, tracked until the app exits."""

    def __init__(self, label: str, command: List[str], process: Optional[subprocess.Popen] = None,
                 streamer=None, kind: str = "forward"):
        self.label = label
        self.command = command
        self.process = process
        self.streamer = streamer
        self.kind = kind

    @property
    def detached(self) -> bool:
        """Window-mode sessions belong to a separate terminal and cannot be polled."""
        return self.process is None

    def is_running(self) -> bool:
        if self.process is None:
            return False
        try:
            return self.process.poll() is None
        except OSError:
            return False

    def stop(self) -> bool:
        if self.streamer is not None:
            self.streamer.stop()
        if not self.is_running():
            return True

        self.process.terminate()
        try:
            self.process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()
        return True

    def __repr__(self):
        return f"Session({self.label!r}, kind={self.kind!r})"
