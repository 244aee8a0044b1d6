import pytest

from etcd_cloudinit.cloudinit.types import File
from etcd_cloudinit.cloudinit.userdata import CLOUD_CONFIG_HEADER, SENTINEL_FILE_COMMAND, BootstrapData


def _files(*paths):
    return [File(path=p, content=p) for p in paths]


def test_prepare_appends_additional_files_after_write_files():
    data = BootstrapData(write_files=_files("/a", "/b", "/c"), additional_files=_files("/x", "/y"))
    data.prepare()
    assert [f.path for f in data.write_files] == ["/a", "/b", "/c", "/x", "/y"]
    assert [f.path for f in data.additional_files] == ["/x", "/y"]


def test_prepare_with_only_additional_files():
    data = BootstrapData(additional_files=_files("/x"))
    data.prepare()
    assert [f.path for f in data.write_files] == ["/x"]


def test_prepare_sets_header_and_sentinel():
    data = BootstrapData()
    data.header = "#!/bin/sh\n"
    data.completion_signal_command = "touch /tmp/done"
    data.prepare()
    assert data.header == CLOUD_CONFIG_HEADER == "## template: jinja\n#cloud-config\n"
    assert data.completion_signal_command == SENTINEL_FILE_COMMAND
    assert data.completion_signal_command == "echo success > /run/cluster-api/bootstrap-success.complete"


@pytest.mark.parametrize("field", ["header", "completion_signal_command"])
def test_derived_fields_are_not_constructor_arguments(field):
    with pytest.raises(TypeError):
        BootstrapData(**{field: "x"})


def test_prepare_is_single_use():
    data = BootstrapData(additional_files=_files("/x"))
    data.prepare()
    data.prepare()
    # documented: a second call appends again
    assert [f.path for f in data.write_files] == ["/x", "/x"]


def test_value_equality():
    a = BootstrapData(pre_join_commands=["echo"], is_control_plane=True)
    b = BootstrapData(pre_join_commands=["echo"], is_control_plane=True)
    assert a == b
    a.prepare()
    assert a != b
    b.prepare()
    assert a == b
