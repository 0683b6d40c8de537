from datetime import datetime
from pathlib import Path
from typing import List, Optional


def log_console(message):
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {message}")


class RunLog:
    """Ordered, user-visible trace of one workflow run."""

    def __init__(self, title: Optional[str] = None, log_file: Optional[str] = None, echo: bool = True):
        self.title = title or f"K8s Port Forward - {datetime.now().strftime('%H:%M:%S')}"
        self.lines: List[str] = []
        self.echo = echo
        self.log_file = Path(log_file).expanduser() if log_file else None

    def log(self, line: str):
        self.lines.append(line)
        if self.echo:
            log_console(line)
        if self.log_file:
            self._write(line)

    def _write(self, line: str):
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
                f.write(f"{timestamp} [{self.title}] {line}\n")
        except OSError as e:
            log_console(f"❌ Failed to write log file {self.log_file}: {e}")
            self.log_file = None

    def __iter__(self):
        return iter(self.lines)

    def __len__(self):
        return len(self.lines)
