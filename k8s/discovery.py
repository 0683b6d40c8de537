import subprocess
from typing import Callable, List, Optional, Tuple

from core.exceptions import KubectlError


class KubernetesDiscovery:
    def __init__(self, kubectl: str = "kubectl", context: Optional[str] = None,
                 timeout: Optional[float] = 30, log: Optional[Callable[[str], None]] = None):
        self.kubectl = kubectl
        self.context = context
        self.timeout = timeout
        self.log = log or (lambda line: None)

    def build_command(self, *args: str) -> List[str]:
        cmd = [self.kubectl, *args]
        if self.context:
            cmd += ["--context", self.context]
        return cmd

    def run_kubectl_command(self, cmd: List[str]) -> Tuple[bool, str]:
        self.log(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=self.timeout)
            return True, result.stdout.strip()
        except subprocess.CalledProcessError as e:
            return False, (e.stderr or "").strip() or f"exit status {e.returncode}"
        except subprocess.TimeoutExpired:
            return False, f"timed out after {self.timeout}s"
        except FileNotFoundError:
            return False, f"{self.kubectl} command not found"
        except (OSError, UnicodeDecodeError) as e:
            return False, f"{self.kubectl} failed: {e}"

    def list_namespaces(self) -> List[str]:
        cmd = self.build_command("get", "namespaces", "-o", "name")
        success, output = self.run_kubectl_command(cmd)
        if not success:
            raise KubectlError(cmd, output)

        namespaces = []
        for line in output.split('\n'):
            if line.strip().startswith('namespace/'):
                namespaces.append(line.strip().replace('namespace/', '', 1))
        return namespaces

    def list_pods(self, namespace: Optional[str] = None) -> str:
        if namespace:
            cmd = self.build_command("get", "pods", "--namespace", namespace)
        else:
            cmd = self.build_command("get", "pods", "--all-namespaces")
        success, output = self.run_kubectl_command(cmd)
        if not success:
            raise KubectlError(cmd, output)
        return output

    def detect_service_port(self, namespace: Optional[str], service_name: str) -> str:
        """Return the first port of the Kubernetes service, raising KubectlError on failure."""
        args = ["get", "service"]
        if namespace:
            args += ["--namespace", namespace]
        args += [service_name, "-o", "jsonpath={.spec.ports[*].port}"]
        cmd = self.build_command(*args)
        success, output = self.run_kubectl_command(cmd)
        if not success:
            raise KubectlError(cmd, output)

        ports = output.split()
        if not ports:
            raise KubectlError(cmd, f"service {service_name} exposes no ports")
        if len(ports) > 1:
            self.log(f"   Service {service_name} exposes ports {', '.join(ports)}, using {ports[0]}")
        return ports[0]
