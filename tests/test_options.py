import io
from datetime import timedelta

import pytest

from composecli.logs import LogConsumer
from composecli.model import Project, RecreateStrategy, ServiceConfig
from composecli.options import (
    CreateFlags,
    UpFlags,
    run_up,
    set_service_scale,
    validate_flags,
)
from composecli.proxy import ServiceProxy


def _project():
    return Project(
        name="demo",
        services=[ServiceConfig(name="foo"), ServiceConfig(name="bar")],
    )


def _recording_backend():
    calls = []
    backend = ServiceProxy(
        up_fn=lambda project, options: calls.append(("up", project, options)),
        create_fn=lambda project, options: calls.append(("create", project, options)),
    )
    return backend, calls


def test_apply_scale_opt():
    project = _project()
    UpFlags(scale=["foo=2"]).apply(project, [])
    assert project.get_service("foo").deploy.replicas == 2


def test_apply_scale_invalid_form():
    with pytest.raises(ValueError, match="invalid --scale option"):
        UpFlags(scale=["foo"]).apply(_project(), [])


def test_apply_no_deps_disables_others():
    project = _project()
    UpFlags(no_deps=True).apply(project, ["bar"])
    assert project.service_names() == ["bar"]
    assert [s.name for s in project.disabled_services] == ["foo"]


def test_apply_exit_code_from_unknown_service():
    with pytest.raises(KeyError):
        UpFlags(exit_code_from="zot").apply(_project(), [])


def test_set_service_scale_unknown():
    with pytest.raises(ValueError, match='unknown service "zot"'):
        set_service_scale(_project(), "zot", 3)


def test_recreate_strategies():
    assert CreateFlags().recreate_strategy() == RecreateStrategy.DIVERGED
    assert CreateFlags(force_recreate=True).recreate_strategy() == RecreateStrategy.FORCE
    assert CreateFlags(no_recreate=True).recreate_strategy() == RecreateStrategy.NEVER
    assert CreateFlags(recreate_deps=True).dependencies_recreate_strategy() == "force"
    assert CreateFlags(no_recreate=True).dependencies_recreate_strategy() == "never"


def test_get_timeout():
    assert CreateFlags(timeout=5).get_timeout() is None
    assert CreateFlags(timeout=5, time_changed=True).get_timeout() == timedelta(seconds=5)


def test_create_apply_pull_and_build():
    project = Project(
        name="demo",
        services=[ServiceConfig(name="a", build={"context": "."}), ServiceConfig(name="b")],
    )
    CreateFlags(pull="always", pull_changed=True, build=True).apply(project)
    assert project.get_service("a").pull_policy == "build"
    assert project.get_service("b").pull_policy == "always"


def test_create_apply_no_build_sets_default_image():
    project = Project(
        name="demo",
        services=[ServiceConfig(name="a", build={"context": "."}), ServiceConfig(name="b", image="redis")],
    )
    CreateFlags(no_build=True).apply(project)
    assert project.get_service("a").build is None
    assert project.get_service("a").image == "demo-a"
    assert project.get_service("b").image == "redis"


@pytest.mark.parametrize(
    "up, create, message",
    [
        (UpFlags(wait=True, attach=["a"]), CreateFlags(), "--wait cannot be combined"),
        (UpFlags(), CreateFlags(build=True, no_build=True), "--build and --no-build"),
        (UpFlags(detach=True, cascade_stop=True), CreateFlags(), "--detach cannot be combined"),
        (UpFlags(), CreateFlags(force_recreate=True, no_recreate=True), "--force-recreate"),
        (UpFlags(), CreateFlags(recreate_deps=True, no_recreate=True), "--always-recreate-deps"),
    ],
)
def test_validate_flags_errors(up, create, message):
    with pytest.raises(ValueError, match=message):
        validate_flags(up, create)


def test_validate_flags_implications():
    up = UpFlags(exit_code_from="foo")
    validate_flags(up, CreateFlags())
    assert up.cascade_stop is True
    waiting = UpFlags(wait=True)
    validate_flags(waiting, CreateFlags())
    assert waiting.detach is True


def test_run_up_no_service():
    backend, calls = _recording_backend()
    with pytest.raises(ValueError, match="no service selected"):
        run_up(backend, CreateFlags(), UpFlags(), Project(name="demo"), [])
    assert calls == []


def test_run_up_ignore_and_remove_orphans():
    backend, _ = _recording_backend()
    project = _project()
    project.environment["COMPOSE_IGNORE_ORPHANS"] = "true"
    with pytest.raises(ValueError, match="cannot be combined"):
        run_up(backend, CreateFlags(remove_orphans=True), UpFlags(), project, [])


def test_run_up_calls_up_with_attach_to_all():
    backend, calls = _recording_backend()
    run_up(backend, CreateFlags(), UpFlags(), _project(), [], out=io.StringIO())
    kind, _, options = calls[0]
    assert kind == "up"
    assert options.start.attach_to == ["foo", "bar"]
    assert isinstance(options.start.attach, LogConsumer)
    assert options.create.recreate == RecreateStrategy.DIVERGED
    assert options.create.inherit is True


def test_run_up_detached_has_no_consumer():
    backend, calls = _recording_backend()
    run_up(backend, CreateFlags(), UpFlags(detach=True), _project(), ["foo"])
    options = calls[0][2]
    assert options.start.attach is None
    assert options.start.attach_to == ["foo"]
    assert options.create.services == ["foo"]


def test_run_up_no_start_only_creates():
    backend, calls = _recording_backend()
    run_up(backend, CreateFlags(), UpFlags(no_start=True, detach=True), _project(), [])
    assert [call[0] for call in calls] == ["create"]