import io

import pytest

from composecli.errors import NotImplementedByBackendError
from composecli.images import human_size, run_images, truncate_id
from composecli.model import ImageSummary
from composecli.proxy import ServiceProxy


def _backend(images, calls=None):
    def images_fn(project_name, options):
        if calls is not None:
            calls.append((project_name, options.services))
        return list(images)

    return ServiceProxy(images_fn=images_fn)


def test_truncate_id_drops_prefix_and_shortens():
    assert truncate_id("sha256:0123456789abcdef") == "0123456789ab"


def test_truncate_id_short_id_unchanged():
    assert truncate_id("abc") == "abc"


def test_human_size_values():
    assert human_size(0) == "0B"
    assert human_size(1000) == "1kB"
    assert human_size(1_500_000) == "1.5MB"


def test_human_size_units_grow():
    assert human_size(999).endswith("B") and not human_size(999).endswith("kB")
    assert human_size(10**9).endswith("GB")


def test_quiet_lists_unique_ids():
    images = [
        ImageSummary(id="sha256:abc", container_name="one"),
        ImageSummary(id="sha256:abc", container_name="two"),
        ImageSummary(id="sha256:def", container_name="three"),
    ]
    out = io.StringIO()
    run_images(_backend(images), "proj", quiet=True, out=out)
    assert out.getvalue() == "abc\ndef\n"


def test_passes_project_and_services():
    calls = []
    run_images(_backend([], calls), "proj", ["web"], quiet=True, out=io.StringIO())
    assert calls == [("proj", ["web"])]


def test_table_sorted_by_container():
    images = [
        ImageSummary(id="sha256:bbb", container_name="zeta", repository="r", tag="t", size=5),
        ImageSummary(id="sha256:aaa", container_name="alpha", size=5),
    ]
    out = io.StringIO()
    run_images(_backend(images), "proj", out=out)
    lines = out.getvalue().splitlines()
    assert lines[0].startswith("Container")
    assert lines[1].startswith("alpha")
    assert lines[2].startswith("zeta")
    assert lines[1].count("<none>") == 2
    assert "aaa" in lines[1]


def test_missing_backend_operation():
    with pytest.raises(NotImplementedByBackendError):
        run_images(ServiceProxy(), "proj", out=io.StringIO())