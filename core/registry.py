from typing import List

from logs.run_log import RunLog, log_console
from pods.pod import Session


class SessionRegistry:
    """Live forward/log sessions and run logs that outlive a single workflow run."""

    def __init__(self):
        self.sessions: List[Session] = []
        self.run_logs: List[RunLog] = []

    def add_session(self, session: Session):
        self.sessions.append(session)

    def add_run_log(self, run_log: RunLog):
        self.run_logs.append(run_log)

    def running_sessions(self) -> List[Session]:
        return [s for s in self.sessions if s.is_running()]

    def stop_all(self) -> int:
        stopped = 0
        for session in self.sessions:
            if session.detached:
                continue
            was_running = session.is_running()
            try:
                session.stop()
            except OSError as e:
                log_console(f"❌ Error stopping {session.label}: {e}")
                continue
            if was_running:
                stopped += 1
        self.sessions = [s for s in self.sessions if s.detached]
        return stopped
