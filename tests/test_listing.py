"""Tests for kubectl pod listing parsing."""

from k8s.listing import parse_pod_listing

ALL_NAMESPACES_LISTING = """\
NAMESPACE   NAME                    READY   STATUS             RESTARTS   AGE
ns1         dev-api-5f-x2           1/1     Running            0          2d
ns1         dev-api-5f-y9           0/1     CrashLoopBackOff   12         2d
ns2         prod-web-7c9d-k2l4      1/1     Running            0          5h
"""

NAMESPACED_LISTING = """\
NAME                    READY   STATUS      RESTARTS   AGE
auth-7d6f-ab1           1/1     Running     0          1d
auth-7d6f-zz9           0/1     Completed   0          1d
"""


class TestParsePodListing:
    def test_skips_rows_that_are_not_running(self):
        records = parse_pod_listing(ALL_NAMESPACES_LISTING)

        assert [r.name for r in records] == ["dev-api-5f-x2", "prod-web-7c9d-k2l4"]
        assert all(r.status == "Running" for r in records)

    def test_namespace_comes_from_column(self):
        records = parse_pod_listing(ALL_NAMESPACES_LISTING, namespace="ignored")

        assert [r.namespace for r in records] == ["ns1", "ns2"]

    def test_namespace_falls_back_to_context(self):
        records = parse_pod_listing(NAMESPACED_LISTING, namespace="prod")

        assert len(records) == 1
        assert records[0].name == "auth-7d6f-ab1"
        assert records[0].namespace == "prod"

    def test_namespace_is_none_without_column_or_context(self):
        records = parse_pod_listing(NAMESPACED_LISTING)

        assert records[0].namespace is None

    def test_columns_located_by_name_not_position(self):
        text = "STATUS  NAME  NAMESPACE\nRunning  web-1-2  ns\nPending  web-3-4  ns\n"

        records = parse_pod_listing(text)

        assert len(records) == 1
        assert records[0].name == "web-1-2"
        assert records[0].namespace == "ns"

    def test_without_status_column_every_row_is_kept(self):
        records = parse_pod_listing("NAME\nweb-a-b\nweb-c-d\n", namespace="ns")

        assert [r.name for r in records] == ["web-a-b", "web-c-d"]
        assert records[0].status is None

    def test_empty_input(self):
        assert parse_pod_listing("") == []
        assert parse_pod_listing(None) == []
        assert parse_pod_listing("   \n  \n") == []

    def test_header_only(self):
        assert parse_pod_listing("NAMESPACE   NAME   STATUS\n") == []

    def test_no_name_column(self):
        assert parse_pod_listing("FOO BAR\n1 2\n") == []

    def test_short_row_is_skipped(self):
        text = "NAMESPACE NAME STATUS\nns1\nns1 api-1-2 Running\n"

        records = parse_pod_listing(text)

        assert [r.name for r in records] == ["api-1-2"]

    def test_status_must_match_exactly(self):
        text = "NAME STATUS\napi-1-2 running\napi-3-4 Running\n"

        assert [r.name for r in parse_pod_listing(text)] == ["api-3-4"]
