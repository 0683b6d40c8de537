import os
from typing import List, Optional, Sequence, Union

from core.workflow import PortForwardWorkflow
from logs.run_log import RunLog, log_console


class KubeForwardTUI:
    def __init__(self, app, clear_screen: bool = False):
        self.app = app
        self.clear_screen = clear_screen
        self.running = True

    @staticmethod
    def _log_console(message):
        log_console(message)

    def _read(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None

    def prompt_choice(self, options: Sequence[str], placeholder: str,
                      allow_multiple: bool = False) -> Union[str, List[str], None]:
        """Numbered menu; an empty answer cancels and returns None."""
        if not options:
            return None

        print(f"\n{placeholder}:")
        print("-" * 40)
        for i, option in enumerate(options, 1):
            print(f"{i:2d}. {option}")
        hint = "numbers separated by commas, ranges like 2-4, or 'all'" if allow_multiple else "number"
        print(f"\n  Enter {hint} (empty to cancel)")

        while True:
            choice = self._read("\nYour choice: ")
            if not choice:
                return None
            selected = self.parse_selection(choice, options, allow_multiple)
            if selected is not None:
                return selected
            print("❌ Invalid choice")

    @staticmethod
    def parse_selection(choice: str, options: Sequence[str],
                        allow_multiple: bool) -> Union[str, List[str], None]:
        choice = choice.strip()
        if choice in options:
            return [choice] if allow_multiple else choice

        if not allow_multiple:
            matches = [option for option in options if option.lower() == choice.lower()]
            if len(matches) == 1:
                return matches[0]
            if choice.isdigit() and 1 <= int(choice) <= len(options):
                return options[int(choice) - 1]
            return None

        if choice.lower() in ('a', 'all', '*'):
            return list(options)

        indexes = []
        for token in choice.replace(',', ' ').split():
            if '-' in token:
                start, _, end = token.partition('-')
                if not (start.isdigit() and end.isdigit()) or int(start) > int(end):
                    return None
                candidates = range(int(start), int(end) + 1)
            elif token.isdigit():
                candidates = [int(token)]
            else:
                return None
            for index in candidates:
                if not 1 <= index <= len(options):
                    return None
                if index not in indexes:
                    indexes.append(index)
        return [options[i - 1] for i in indexes] or None

    def prompt_text(self, prompt: str, suggested: str = "") -> Optional[str]:
        answer = self._read(f"{prompt} [{suggested}]: ")
        if answer is None:
            return None
        return answer or suggested

    def notify_info(self, message: str):
        self._log_console(f"ℹ️  {message}")

    def notify_error(self, message: str):
        self._log_console(f"❌ {message}")

    def run_workflow(self):
        settings = self.app.settings
        run_log = RunLog(log_file=settings.log_file)
        self.app.registry.add_run_log(run_log)
        self._log_console(f"📋 {run_log.title}")

        workflow = PortForwardWorkflow(
            cluster=self.app.create_discovery(run_log),
            prompter=self,
            launcher=self.app.launcher,
            run_log=run_log,
            settings=settings,
            progress=self.app.progress,
        )
        return workflow.run()

    def show_sessions(self):
        sessions = self.app.registry.sessions
        print(f"\n📋 Sessions ({len(sessions)}):")
        print("-" * 50)
        if not sessions:
            print("   (none)")
        for i, session in enumerate(sessions, 1):
            if session.detached:
                status = "🪟 WINDOW"
            elif session.is_running():
                status = "🟢 RUNNING"
            else:
                status = "🔴 STOPPED"
            print(f"{i:2d}. {session.label} [{session.kind}] - {status}")

    def show_menu(self):
        if self.clear_screen:
            os.system('cls' if os.name == 'nt' else 'clear')
        running = len(self.app.registry.running_sessions())
        print(f"\n🚀 kubeforward - Kubernetes Port Forward ({running} running)")
        print("=" * 50)
        print("🎮 Commands:")
        print("  new      : Forward services")
        print("  list     : Show sessions")
        print("  stop     : Stop all sessions")
        print("  quit     : Stop all sessions and quit")

    def handle_choice(self, choice: Optional[str]):
        if choice is None:
            choice = "quit"
        choice = choice.lower().strip()

        if choice in ('n', 'new'):
            self.run_workflow()
        elif choice in ('l', 'list'):
            self.show_sessions()
        elif choice in ('s', 'stop'):
            stopped = self.app.registry.stop_all()
            self._log_console(f"🛑 Stopped {stopped} session(s)")
        elif choice in ('q', 'quit'):
            self._log_console("👋 Stopping all sessions and exiting...")
            self.app.registry.stop_all()
            self.running = False
        elif choice == "":
            pass
        else:
            print("❌ Invalid choice")

    def run(self, start_immediately: bool = True):
        if start_immediately:
            self.run_workflow()
        while self.running:
            self.show_menu()
            self.handle_choice(self._read("\nEnter your choice: "))
