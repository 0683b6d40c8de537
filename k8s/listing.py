from typing import List, Optional

from models.models import PodRecord

RUNNING_STATUS = "Running"


def _column_index(headers: List[str], name: str) -> int:
    try:
        return headers.index(name)
    except ValueError:
        return -1


def _column(columns: List[str], index: int) -> Optional[str]:
    if index == -1 or index >= len(columns):
        return None
    return columns[index]


def parse_pod_listing(pods_data: str, namespace: Optional[str] = None) -> List[PodRecord]:
    """Parse `kubectl get pods` output into running PodRecords.

    Columns are located by header name, so listings with or without the
    NAMESPACE column (``--all-namespaces`` vs ``--namespace``) both work.
    Rows whose STATUS is present and not exactly ``Running`` are dropped.
    """
    lines = [line for line in (pods_data or "").strip().split('\n') if line.strip()]
    if len(lines) < 2:
        return []

    headers = lines[0].split()
    namespace_index = _column_index(headers, "NAMESPACE")
    name_index = _column_index(headers, "NAME")
    status_index = _column_index(headers, "STATUS")
    if name_index == -1:
        return []

    records = []
    for line in lines[1:]:
        columns = line.split()

        status = _column(columns, status_index)
        if status_index != -1 and status != RUNNING_STATUS:
            continue

        name = _column(columns, name_index)
        if not name:
            continue

        if namespace_index != -1:
            pod_namespace = _column(columns, namespace_index)
        else:
            pod_namespace = namespace

        records.append(PodRecord(name=name, namespace=pod_namespace, status=status))
    return records
