import subprocess
import threading
from typing import Callable, Optional


class LogStreamer:
    """Relays a child process's output line by line, prefixed with its label."""

    def __init__(self, process: subprocess.Popen, label: str, sink: Optional[Callable[[str], None]] = None):
        self.process = process
        self.label = label
        self.sink = sink or (lambda line: print(line, flush=True))
        self.is_streaming = False
        self._stream_thread = None

    def start(self):
        if self.is_streaming:
            return
        self.is_streaming = True
        self._stream_thread = threading.Thread(target=self._stream_output, daemon=True)
        self._stream_thread.start()

    def _stream_output(self):
        """Reads until the process closes stdout or streaming is stopped."""
        stdout = self.process.stdout
        if stdout is None:
            self.is_streaming = False
            return
        try:
            for line in iter(stdout.readline, ''):
                if not self.is_streaming:
                    break
                if line.strip():
                    self.sink(f"[{self.label}] {line.rstrip()}")
        except (OSError, ValueError) as e:
            # stdout closed underneath us while stopping
            if self.is_streaming:
                self.sink(f"[{self.label}] ❌ Output stream error: {e}")
        finally:
            self.is_streaming = False

    def stop(self, timeout: float = 2):
        self.is_streaming = False
        if self._stream_thread and self._stream_thread.is_alive():
            self._stream_thread.join(timeout=timeout)
        self._stream_thread = None
