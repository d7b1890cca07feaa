import io
import json

import pytest

from composecli.errors import NotImplementedByBackendError, ParsingFailedError
from composecli.model import ContainerSummary, PortPublisher
from composecli.proxy import ServiceProxy
from composecli.ps import (
    container_rows,
    displayable_ports,
    ellipsis,
    filter_by_status,
    parse_filter,
    run_ps,
)


def _backend(containers, calls=None):
    def ps_fn(project_name, options):
        if calls is not None:
            calls.append((project_name, options))
        return list(containers)

    return ServiceProxy(ps_fn=ps_fn)


def test_ps_pretty():
    containers = [
        ContainerSummary(
            id="abc123",
            name="ABC",
            publishers=[
                PortPublisher(target_port=8080, published_port=8080, protocol="tcp"),
                PortPublisher(target_port=8443, published_port=8443, protocol="tcp"),
            ],
        )
    ]
    out = io.StringIO()
    run_ps(_backend(containers), "test", out=out)
    assert "8080/tcp, 8443/tcp" in out.getvalue()


def test_parse_filter_status():
    assert parse_filter("status=running") == ["running"]


def test_parse_filter_empty():
    assert parse_filter("") == []


def test_parse_filter_bad_form():
    with pytest.raises(ValueError, match="KEY=VAL"):
        parse_filter("status")


def test_parse_filter_source_not_implemented():
    with pytest.raises(NotImplementedByBackendError):
        parse_filter("source=image")


def test_parse_filter_unknown_key():
    with pytest.raises(ValueError, match="unknown filter foo"):
        parse_filter("foo=bar")


def test_filter_by_status_keeps_matching():
    containers = [
        ContainerSummary(name="a", state="running"),
        ContainerSummary(name="b", state="exited"),
        ContainerSummary(name="c", state="paused"),
    ]
    kept = filter_by_status(containers, ["running", "paused"])
    assert [c.name for c in kept] == ["a", "c"]


def test_ellipsis_short_text_unchanged():
    assert ellipsis("abc", 20) == "abc"


def test_ellipsis_truncates():
    assert ellipsis("abcdef", 4) == "abc…"


def test_ellipsis_zero_width():
    assert ellipsis("abc", 0) == ""


def test_displayable_ports_none():
    assert displayable_ports(ContainerSummary()) == ""


def test_displayable_ports_range():
    container = ContainerSummary(
        publishers=[
            PortPublisher(target_port=8081, published_port=8081, protocol="tcp"),
            PortPublisher(target_port=8080, published_port=8080, protocol="tcp"),
        ]
    )
    assert displayable_ports(container) == "8080-8081/tcp"


def test_displayable_ports_host_mapping():
    container = ContainerSummary(
        publishers=[
            PortPublisher(url="0.0.0.0", target_port=8080, published_port=80, protocol="tcp")
        ]
    )
    assert displayable_ports(container) == "0.0.0.0:80->8080/tcp"


def test_displayable_ports_same_public_port_with_ip():
    container = ContainerSummary(
        publishers=[
            PortPublisher(url="0.0.0.0", target_port=80, published_port=80, protocol="tcp")
        ]
    )
    assert displayable_ports(container) == "0.0.0.0:80->80/tcp"


def test_container_rows_status():
    rows = container_rows(
        [
            ContainerSummary(name="a", command="sh", service="s", state="running", health="healthy"),
            ContainerSummary(name="b", command="sh", service="s", state="exited", exit_code=3),
            ContainerSummary(name="c", command="sh", service="s", state="created"),
        ]
    )
    assert [row[3] for row in rows] == ["running (healthy)", "exited (3)", "created"]
    assert rows[0][1] == '"sh"'


def test_run_ps_missing_service():
    backend = _backend([ContainerSummary(name="a", service="web")])
    with pytest.raises(ValueError, match="no such service: db"):
        run_ps(backend, "test", services=["db"], out=io.StringIO())


def test_run_ps_quiet_sorted_and_filtered():
    containers = [
        ContainerSummary(id="2", name="b", state="running"),
        ContainerSummary(id="1", name="a", state="running"),
        ContainerSummary(id="3", name="c", state="exited"),
    ]
    out = io.StringIO()
    run_ps(_backend(containers), "test", quiet=True, statuses=["running"], out=out)
    assert out.getvalue() == "1\n2\n"


def test_run_ps_services():
    containers = [
        ContainerSummary(name="a", service="web"),
        ContainerSummary(name="b", service="web"),
        ContainerSummary(name="c", service="db"),
    ]
    out = io.StringIO()
    run_ps(_backend(containers), "test", show_services=True, out=out)
    assert out.getvalue() == "web\ndb\n"


def test_run_ps_passes_options():
    calls = []
    run_ps(_backend([], calls), "proj", all=True, quiet=True, out=io.StringIO())
    name, options = calls[0]
    assert name == "proj"
    assert options.all is True


def test_run_ps_json():
    containers = [ContainerSummary(id="x", name="a", service="web")]
    out = io.StringIO()
    run_ps(_backend(containers), "test", fmt="json", out=out)
    decoded = json.loads(out.getvalue())
    assert decoded[0]["name"] == "a"


def test_run_ps_bad_format():
    with pytest.raises(ParsingFailedError):
        run_ps(_backend([]), "test", fmt="xml", out=io.StringIO())