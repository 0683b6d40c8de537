from dataclasses import dataclass, field
from typing import Dict, List, Optional

ENVIRONMENTS = ["dev", "qa", "stg", "prod"]
DEFAULT_ENVIRONMENT = "default"


@dataclass
class PodRecord:
    name: str
    namespace: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class ServiceInstance:
    id: str
    namespace: Optional[str]
    service_name: str

    @property
    def pod_name(self) -> str:
        return f"{self.service_name}-{self.id}"


@dataclass
class ServiceGroup:
    """Short service name -> environment label -> ServiceInstance."""
    services: Dict[str, Dict[str, ServiceInstance]] = field(default_factory=dict)

    def add(self, short_name: str, environment: str, instance: ServiceInstance) -> Optional[ServiceInstance]:
        """Store an instance, returning the one it replaced (last write wins)."""
        envs = self.services.setdefault(short_name, {})
        previous = envs.get(environment)
        envs[environment] = instance
        return previous

    def service_names(self) -> List[str]:
        return sorted(self.services.keys())

    def environments(self, short_name: str) -> List[str]:
        return list(self.services.get(short_name, {}).keys())

    def get(self, short_name: str, environment: str) -> Optional[ServiceInstance]:
        return self.services.get(short_name, {}).get(environment)

    def as_dict(self) -> Dict[str, Dict[str, Dict[str, Optional[str]]]]:
        return {
            name: {
                env: {'id': inst.id, 'namespace': inst.namespace, 'serviceName': inst.service_name}
                for env, inst in envs.items()
            }
            for name, envs in self.services.items()
        }

    def __contains__(self, short_name: str) -> bool:
        return short_name in self.services

    def __len__(self) -> int:
        return len(self.services)


@dataclass(frozen=True)
class ServiceConfig:
    selected_service: str
    environment: str
    service_details: ServiceInstance
    local_port: str
    service_port: str
    show_logs: bool

    @property
    def pod_name(self) -> str:
        return self.service_details.pod_name

    def resolve_namespace(self, run_namespace: Optional[str]) -> Optional[str]:
        return run_namespace or self.service_details.namespace

    @property
    def display_label(self) -> str:
        env_label = f"{self.environment}~" if self.environment != DEFAULT_ENVIRONMENT else ""
        return f"k8s - {env_label}{self.selected_service}:{self.local_port}"

    @property
    def url(self) -> str:
        return f"http://localhost:{self.local_port}"


@dataclass
class Settings:
    kubectl: str = "kubectl"
    context: Optional[str] = None
    namespace: Optional[str] = None
    base_local_port: int = 3000
    default_service_port: str = "3000"
    command_timeout: float = 30
    launch_mode: str = "inline"
    log_file: Optional[str] = None
