"""Tests for source file discovery."""

import os

import pytest

from buldr.build import MissingSourceError, SourceScanner
from buldr.build.source_scanner import needs_rebuild
from buldr.config import GlobalSettings, Project, ProjectKind


def make_project(name="app", src=("src",), **kwargs):
    return Project(name=name, kind=ProjectKind.EXECUTABLE, src=tuple(src), **kwargs)


class TestSourceScanner:
    """Test source resolution and object paths."""

    @pytest.fixture
    def temp_project(self, tmp_path):
        """Create temporary project structure."""
        src = tmp_path / "src"
        (src / "net").mkdir(parents=True)
        (src / "b.c").write_text("int b;")
        (src / "a.cpp").write_text("int a;")
        (src / "readme.md").write_text("docs")
        (src / "net" / "socket.cc").write_text("int s;")
        (src / "net" / "socket.h").write_text("#pragma once")
        return tmp_path

    def test_directory_is_walked_recursively_in_lexical_order(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())

        sources = scanner.resolve_sources(make_project())

        root = temp_project.resolve()
        assert sources == [
            root / "src" / "a.cpp",
            root / "src" / "b.c",
            root / "src" / "net" / "socket.cc",
        ]

    def test_extension_filter(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())

        sources = scanner.resolve_sources(make_project(extensions=(".c",)))

        assert [s.name for s in sources] == ["b.c"]

    def test_file_entries_are_taken_as_is(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())

        sources = scanner.resolve_sources(make_project(src=("src/b.c", "src/a.cpp")))

        assert [s.name for s in sources] == ["b.c", "a.cpp"]

    def test_file_entry_with_unrecognized_extension_is_skipped(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())

        assert scanner.resolve_sources(make_project(src=("src/readme.md",))) == []

    def test_duplicates_are_collapsed(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())

        sources = scanner.resolve_sources(make_project(src=("src/b.c", "src")))

        assert [s.name for s in sources] == ["b.c", "a.cpp", "socket.cc"]

    def test_missing_source(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())

        with pytest.raises(MissingSourceError) as exc_info:
            scanner.resolve_sources(make_project(src=("src", "missing")))

        assert exc_info.value.project == "app"
        assert exc_info.value.path.name == "missing"

    def test_object_path_layout(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings(obj="build/obj"))
        project = make_project()

        obj = scanner.object_path_for(project, temp_project / "src" / "net" / "socket.cc")

        assert obj == temp_project.resolve() / "build" / "obj" / "app" / "src" / "net" / "socket.cc.o"

    def test_object_paths_do_not_collide_across_projects(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())
        source = temp_project / "src" / "b.c"

        first = scanner.object_path_for(make_project("one"), source)
        second = scanner.object_path_for(make_project("two"), source)

        assert first != second

    def test_same_stem_different_extension(self, temp_project):
        (temp_project / "src" / "b.cpp").write_text("int b2;")
        scanner = SourceScanner(temp_project, GlobalSettings())

        units = scanner.scan(make_project(src=("src/b.c", "src/b.cpp")))

        assert [u.object_path.name for u in units] == ["b.c.o", "b.cpp.o"]

    def test_multi_dot_extension(self, temp_project):
        (temp_project / "src" / "msg.pb.cc").write_text("")
        scanner = SourceScanner(temp_project, GlobalSettings())

        obj = scanner.object_path_for(make_project(), temp_project / "src" / "msg.pb.cc")

        assert obj.name == "msg.pb.cc.o"

    def test_scan_builds_units(self, temp_project):
        scanner = SourceScanner(temp_project, GlobalSettings())

        units = scanner.scan(make_project())

        assert [u.project for u in units] == ["app", "app", "app"]
        assert all(u.source.is_absolute() for u in units)
        assert units[0].object_path.name == "a.cpp.o"


class TestNeedsRebuild:
    """Test timestamp staleness check."""

    def test_missing_object(self, tmp_path):
        source = tmp_path / "main.c"
        source.write_text("")

        assert needs_rebuild(source, tmp_path / "main.o") is True

    def test_object_newer_than_source(self, tmp_path):
        source = tmp_path / "main.c"
        obj = tmp_path / "main.o"
        source.write_text("")
        obj.write_text("")
        os.utime(source, (1000, 1000))
        os.utime(obj, (2000, 2000))

        assert needs_rebuild(source, obj) is False

    def test_equal_timestamps_are_up_to_date(self, tmp_path):
        source = tmp_path / "main.c"
        obj = tmp_path / "main.o"
        source.write_text("")
        obj.write_text("")
        os.utime(source, (1000, 1000))
        os.utime(obj, (1000, 1000))

        assert needs_rebuild(source, obj) is False

    def test_source_newer_than_object(self, tmp_path):
        source = tmp_path / "main.c"
        obj = tmp_path / "main.o"
        source.write_text("")
        obj.write_text("")
        os.utime(source, (3000, 3000))
        os.utime(obj, (2000, 2000))

        assert needs_rebuild(source, obj) is True
