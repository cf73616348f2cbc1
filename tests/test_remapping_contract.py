"""Tests for the hand-off to the remapping engine."""

import pytest

from common.errors import ErrorKind
from mappings.models import MappingEntry, MappingSource
from remapping.contract import (
    ErrorSink,
    ProgressSink,
    RemapError,
    Remapper,
    default_output_path,
    remap_archive,
)

from conftest import write_mapping_dir


class RecordingRemapper(Remapper):
    """Records its arguments instead of rewriting bytecode."""

    def __init__(self):
        self.calls = []

    def remap(self, input_archive, output_archive, entry, error_sink, progress_sink):
        self.calls.append((input_archive, output_archive, entry, error_sink, progress_sink))
        progress_sink.start(1, "Remapping classes")
        progress_sink.progress(1)
        return output_archive


@pytest.mark.parametrize("given,expected", [
    ("mod.jar", "mod-deobf.jar"),
    ("/tmp/build/mod-1.0.jar", "/tmp/build/mod-1.0-deobf.jar"),
    ("mod.zip", "mod.zip-deobf"),
])
def test_default_output_path(given, expected):
    assert default_output_path(given) == expected


class TestRemapArchive:
    """Test entry validation and delegation."""

    def test_delegates_with_default_sinks(self, tmp_path):
        directory = write_mapping_dir(tmp_path / "1.12.2")
        entry = MappingEntry("1.12.2-stable_39", MappingSource.DOWNLOADED, str(directory))
        remapper = RecordingRemapper()

        output = remap_archive(remapper, "mod.jar", entry)

        assert output == "mod-deobf.jar"
        _, out, passed_entry, error_sink, progress_sink = remapper.calls[0]
        assert out == "mod-deobf.jar"
        assert passed_entry is entry
        assert isinstance(error_sink, ErrorSink)
        assert isinstance(progress_sink, ProgressSink)

    def test_explicit_output_and_sinks(self, tmp_path):
        directory = write_mapping_dir(tmp_path / "custom")
        entry = MappingEntry("custom", MappingSource.CUSTOM, str(directory))
        sink = ErrorSink()
        remapper = RecordingRemapper()

        output = remap_archive(remapper, "mod.jar", entry, output_archive="out.jar", error_sink=sink)

        assert output == "out.jar"
        assert remapper.calls[0][3] is sink

    def test_invalid_entry_is_rejected(self, tmp_path):
        entry = MappingEntry("stable_39", MappingSource.BUNDLED, str(tmp_path / "missing"))
        remapper = RecordingRemapper()

        with pytest.raises(RemapError) as excinfo:
            remap_archive(remapper, "mod.jar", entry)

        assert excinfo.value.kind == ErrorKind.INTEGRITY_FAILURE
        assert remapper.calls == []

    def test_remapper_is_abstract(self):
        with pytest.raises(TypeError):
            Remapper()  # pylint: disable=abstract-class-instantiated
