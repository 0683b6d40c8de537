"""
Interactive port-forward workflow.

One run walks the operator from namespace selection to running
``kubectl port-forward`` (and optionally ``kubectl logs -f``) processes:

    START -> NAMESPACE_CHOSEN -> PODS_LISTED -> SERVICES_LISTED
          -> SERVICES_CHOSEN -> CONFIGURING_SERVICE* -> ALL_CONFIGURED
          -> EXECUTING -> DONE

Cancelling the namespace or service prompt ends the run as ABORTED.
Cancelling an environment prompt only skips that service. Unexpected
errors are caught once in ``run()`` and end the run as FAILED; processes
already started are left running.
"""

from enum import Enum
from typing import List, Optional

from core.exceptions import LaunchError
from k8s.listing import parse_pod_listing
from models.models import ServiceConfig, ServiceGroup, Settings
from pods.grouping import group_services
from pods.launcher import logs_command, port_forward_command
from pods.ports import canonical_port, is_valid_port, next_available_port
from ui.progress import NullProgress

ALL_NAMESPACES = "--all-namespaces"
YES = "Yes"
NO = "No"


class WorkflowState(Enum):
    START = "start"
    NAMESPACE_CHOSEN = "namespace_chosen"
    PODS_LISTED = "pods_listed"
    SERVICES_LISTED = "services_listed"
    SERVICES_CHOSEN = "services_chosen"
    CONFIGURING_SERVICE = "configuring_service"
    ALL_CONFIGURED = "all_configured"
    EXECUTING = "executing"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"


class PortForwardWorkflow:
    def __init__(self, cluster, prompter, launcher, run_log, settings: Optional[Settings] = None,
                 progress=None):
        self.cluster = cluster
        self.prompter = prompter
        self.launcher = launcher
        self.run_log = run_log
        self.settings = settings or Settings()
        self.progress = progress or NullProgress()

        self.state = WorkflowState.START
        self.namespace: Optional[str] = None
        self.services: ServiceGroup = ServiceGroup()
        self.reserved_ports = set()
        self.configs: List[ServiceConfig] = []
        self.urls: List[str] = []
        self.failures: List[str] = []

    def log(self, line: str):
        self.run_log.log(line)

    def run(self) -> WorkflowState:
        try:
            self._run()
        except Exception as e:
            self.progress.stop(False)
            self.state = WorkflowState.FAILED
            self.log(f"❌ Error: {e}")
            self.prompter.notify_error(f"Error: {e}")
        return self.state

    def _run(self):
        if not self.choose_namespace():
            self.state = WorkflowState.ABORTED
            return

        self.services = self.load_services()
        service_names = self.services.service_names()
        self.state = WorkflowState.SERVICES_LISTED
        if not service_names:
            self.prompter.notify_info("No services found")
            self.state = WorkflowState.DONE
            return

        selected = self.prompter.prompt_choice(
            service_names, "Select one or more services", allow_multiple=True
        )
        if not selected:
            self.state = WorkflowState.ABORTED
            return
        self.state = WorkflowState.SERVICES_CHOSEN
        self.log(f"You selected {len(selected)} service(s): {', '.join(selected)}")

        for selected_service in selected:
            self.state = WorkflowState.CONFIGURING_SERVICE
            config = self.configure_service(selected_service)
            if config is not None:
                self.configs.append(config)
        self.state = WorkflowState.ALL_CONFIGURED

        if not self.configs:
            self.prompter.notify_info(
                "No services configured. Select at least one and choose an environment."
            )
            self.state = WorkflowState.DONE
            return

        self.state = WorkflowState.EXECUTING
        self.execute()
        self.state = WorkflowState.DONE

    def choose_namespace(self) -> bool:
        if self.settings.namespace:
            self.namespace = None if self.settings.namespace == ALL_NAMESPACES else self.settings.namespace
            self.log(f"Using namespace: {self.settings.namespace}")
            self.state = WorkflowState.NAMESPACE_CHOSEN
            return True

        self.progress.start("Loading namespaces")
        namespaces = self.cluster.list_namespaces()
        self.progress.stop()

        choice = self.prompter.prompt_choice([ALL_NAMESPACES, *namespaces], "Select a namespace (or all)")
        if not choice:
            return False
        self.log(f"You selected namespace: {choice}")
        self.namespace = None if choice == ALL_NAMESPACES else choice
        self.state = WorkflowState.NAMESPACE_CHOSEN
        return True

    def load_services(self) -> ServiceGroup:
        self.progress.start("Loading services")
        pods_data = self.cluster.list_pods(self.namespace)
        self.progress.stop()
        self.state = WorkflowState.PODS_LISTED

        records = parse_pod_listing(pods_data, self.namespace)
        return group_services(records, self.namespace, log=self.log)

    def suggest_local_port(self) -> str:
        return next_available_port(self.settings.base_local_port, self.reserved_ports)

    def resolve_local_port(self, requested: Optional[str], suggested: str) -> str:
        local_port = (requested or "").strip() or suggested
        if is_valid_port(local_port):
            local_port = canonical_port(local_port)
        if not is_valid_port(local_port) or local_port in self.reserved_ports:
            self.log(f'Invalid or already used port "{local_port}", using {suggested}')
            local_port = suggested
        self.reserved_ports.add(local_port)
        return local_port

    def detect_service_port(self, namespace: Optional[str], service_name: str) -> str:
        fallback = self.settings.default_service_port
        self.progress.start("Detecting port on the Kubernetes service")
        try:
            service_port = self.cluster.detect_service_port(namespace, service_name)
        except Exception as e:
            self.progress.stop(False)
            self.log(f"⚠️  Error detecting port: {e}")
            return fallback
        self.progress.stop()
        self.log(f"Port detected: {service_port}")
        return service_port or fallback

    def configure_service(self, selected_service: str) -> Optional[ServiceConfig]:
        self.log(f"--- Configuring service: {selected_service} ---")

        environment = self.prompter.prompt_choice(
            self.services.environments(selected_service),
            f"Select environment for {selected_service}",
        )
        if not environment:
            self.log(f"Skipped {selected_service} - no environment selected")
            return None
        self.log(f"Selected environment: {environment}")

        details = self.services.get(selected_service, environment)
        if details is None:
            self.log(f"Skipped {selected_service} - unknown environment {environment}")
            return None
        self.log(f"Service ID: {details.id}")
        self.log(f"Service namespace: {details.namespace}")
        self.log(f"Service name: {details.service_name}")

        suggested = self.suggest_local_port()
        requested = self.prompter.prompt_text(
            f"Enter local port for {selected_service} (default: {suggested})", suggested
        )
        local_port = self.resolve_local_port(requested, suggested)
        self.log(f"Local port: {local_port}")

        namespace = self.namespace or details.namespace
        detected = self.detect_service_port(namespace, details.service_name)
        fallback = self.settings.default_service_port
        service_port = self.prompter.prompt_text(
            f"Enter the destination port on the Kubernetes service for {selected_service}. "
            f"Try using port {fallback} if the detected port fails",
            detected,
        )
        service_port = (service_port or "").strip() or fallback
        self.log(f"Destination port: {service_port}")

        answer = self.prompter.prompt_choice(
            [YES, NO], f"Would you like to see the logs in real time for {selected_service}?"
        )
        show_logs = answer == YES
        self.log(f"Show logs: {answer or NO}")

        return ServiceConfig(
            selected_service=selected_service,
            environment=environment,
            service_details=details,
            local_port=local_port,
            service_port=service_port,
            show_logs=show_logs,
        )

    def execute(self):
        self.log(f"--- Starting port forwarding for {len(self.configs)} service(s) ---")
        self.progress.start("Initializing port forwarding")

        kubectl = self.settings.kubectl
        context = self.settings.context
        for cfg in self.configs:
            namespace = cfg.resolve_namespace(self.namespace)

            forward_cmd = port_forward_command(namespace, cfg.pod_name, cfg.local_port, cfg.service_port,
                                               kubectl=kubectl, context=context)
            if not self._launch(forward_cmd, cfg.display_label, "forward"):
                continue
            self.urls.append(cfg.url)

            if not cfg.show_logs:
                continue
            self._launch(logs_command(namespace, cfg.pod_name, kubectl=kubectl, context=context),
                         cfg.display_label, "logs")
        self.progress.stop(not self.failures)

        self.log(f"✓ Completed processing {len(self.configs)} service(s)")
        if self.urls:
            self.prompter.notify_info(f"Port forwarding started: {', '.join(self.urls)}")

    def _launch(self, command: List[str], label: str, kind: str) -> bool:
        self.log(f"Running: {' '.join(command)}")
        try:
            self.launcher.start_process_stream(command, label, kind=kind)
        except LaunchError as e:
            self.failures.append(label)
            self.log(f"❌ {e}")
            self.prompter.notify_error(str(e))
            return False
        return True
