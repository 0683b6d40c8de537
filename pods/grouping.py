import re
from typing import Callable, Iterable, Optional

from models.models import DEFAULT_ENVIRONMENT, ENVIRONMENTS, PodRecord, ServiceGroup, ServiceInstance

ENV_PREFIX_RE = re.compile(r"^(" + "|".join(ENVIRONMENTS) + r")-")


def environment_for(pod_name: str) -> str:
    for env in ENVIRONMENTS:
        if pod_name.startswith(f"{env}-"):
            return env
    return DEFAULT_ENVIRONMENT


def short_service_name(service_name: str, namespace: Optional[str]) -> str:
    short_name = ENV_PREFIX_RE.sub("", service_name, count=1)
    if namespace:
        short_name = re.sub(r"^" + re.escape(namespace) + r"-", "", short_name, count=1)
    return short_name


def split_pod_name(pod_name: str):
    """Return (service_name, instance_id), or None when the name is too short.

    Deployable pods are named ``<service>-<hash>-<suffix>``; the trailing two
    tokens form the instance id.
    """
    parts = pod_name.split("-")
    if len(parts) < 3:
        return None
    return "-".join(parts[:-2]), "-".join(parts[-2:])


def group_services(records: Iterable[PodRecord], namespace: Optional[str] = None,
                   log: Optional[Callable[[str], None]] = None) -> ServiceGroup:
    group = ServiceGroup()
    for record in records:
        split = split_pod_name(record.name)
        if split is None:
            continue
        service_name, instance_id = split

        pod_namespace = record.namespace or namespace
        environment = environment_for(record.name)
        short_name = short_service_name(service_name, pod_namespace)

        instance = ServiceInstance(id=instance_id, namespace=pod_namespace, service_name=service_name)
        previous = group.add(short_name, environment, instance)

        # Last write wins; only unrelated services sharing a short name are worth reporting.
        if previous is not None and log is not None and previous.service_name != service_name:
            log(f"⚠️  short-name collision: '{short_name}' [{environment}] "
                f"{previous.service_name} replaced by {service_name}")
    return group
