import argparse
import os
import sys

from config.config_manager import ConfigManager
from core.exceptions import ConfigurationError
from core.registry import SessionRegistry
from k8s.discovery import KubernetesDiscovery
from logs.run_log import log_console
from models.models import Settings
from pods.launcher import LAUNCH_MODES, ProcessLauncher
from ui.progress import ConsoleProgress
from ui.tui import KubeForwardTUI

extra_paths = [
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/usr/bin",
    "/bin",
    "/usr/sbin",
    "/sbin"
]


def extend_path():
    current_path = os.environ.get("PATH", "")
    for p in extra_paths:
        if p not in current_path.split(os.pathsep):
            current_path += os.pathsep + p
    os.environ["PATH"] = current_path


class AppContext:
    """Everything that lives longer than one workflow run."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.registry = SessionRegistry()
        self.launcher = ProcessLauncher(self.registry, mode=settings.launch_mode)
        self.progress = ConsoleProgress()

    def create_discovery(self, run_log) -> KubernetesDiscovery:
        return KubernetesDiscovery(
            kubectl=self.settings.kubectl,
            context=self.settings.context,
            timeout=self.settings.command_timeout,
            log=run_log.log,
        )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("kubeforward", description="Interactive kubectl port-forward for services grouped by environment")
    p.add_argument("--namespace", "-n", default=None, help="Namespace to use, or --all-namespaces (skips the namespace prompt)")
    p.add_argument("--all-namespaces", "-A", action="store_true", help="List pods across all namespaces")
    p.add_argument("--context", default=None, help="Kubecontext override")
    p.add_argument("--launch-mode", choices=LAUNCH_MODES, default=None, help="Run processes inline or in new terminal windows")
    p.add_argument("--base-port", default=None, help="First local port to suggest")
    p.add_argument("--save-config", action="store_true", help="Write the effective settings to the config file and exit")
    p.add_argument("--config-info", action="store_true", help="Show where the config file is looked up and exit")
    return p


def load_settings(args) -> Settings:
    settings = ConfigManager.read_config()
    if args.all_namespaces:
        settings.namespace = "--all-namespaces"
    elif args.namespace:
        settings.namespace = args.namespace
    if args.context:
        settings.context = args.context
    if args.launch_mode:
        settings.launch_mode = args.launch_mode
    if args.base_port:
        settings.base_local_port = args.base_port
    return ConfigManager.validate(settings)


def main(argv=None):
    args = build_parser().parse_args(argv)
    extend_path()

    if args.config_info:
        for key, value in ConfigManager.get_config_info().items():
            print(f"{key}: {value}")
        return

    try:
        settings = load_settings(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    if args.save_config:
        try:
            ConfigManager.save_config(settings)
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            sys.exit(2)
        return

    app = AppContext(settings)
    tui = KubeForwardTUI(app)
    try:
        tui.run()
    except KeyboardInterrupt:
        print("\n👋 Shutting down...")
        app.registry.stop_all()
    finally:
        log_console("👋 kubeforward finished")


if __name__ == "__main__":
    main()
