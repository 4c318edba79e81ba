"""Shared fixtures for buldr unit tests."""

from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from buldr.build import ToolResult, ToolRunner
from buldr.config import BuildConfig


class FakeToolRunner(ToolRunner):
    """Records invocations and writes the output file a real tool would."""

    def __init__(self, fail_when=None, stderr: str = "error: expected ';'"):
        self.calls: List[List[str]] = []
        self.fail_when = fail_when
        self.stderr = stderr

    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> ToolResult:
        args = list(args)
        self.calls.append(args)

        if self.fail_when is not None and self.fail_when(args):
            return ToolResult(returncode=1, stdout="", stderr=self.stderr)

        if "-o" in args:
            output = Path(args[args.index("-o") + 1])
        else:
            output = next(Path(arg) for arg in args if arg.endswith(".a"))
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text("built")
        return ToolResult(returncode=0)

    def calls_for(self, tool: str) -> List[List[str]]:
        return [call for call in self.calls if call[0] == tool]


@pytest.fixture
def fake_runner():
    return FakeToolRunner()


@pytest.fixture
def make_runner():
    """Factory for additional runners within one test."""
    return FakeToolRunner


def write_sources(root: Path, files: Sequence[str]) -> None:
    for name in files:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"/* {name} */\n")


@pytest.fixture
def sample_root(tmp_path):
    """Project tree: app -> util -> core, plus an unrelated default tool."""
    write_sources(tmp_path, [
        "core/src/core.c",
        "core/src/detail/alloc.c",
        "core/include/core.h",
        "util/src/util.cpp",
        "app/src/main.c",
        "app/src/notes.txt",
        "tool/tool.c",
    ])
    return tmp_path


@pytest.fixture
def sample_config():
    return BuildConfig.from_dict({
        "config": {
            "compiler": "cc",
            "compiler_opts": ["-O2"],
            "linker": "ld",
            "packer": "ar",
            "bin": "bin",
            "obj": "obj",
        },
        "project": [
            {
                "name": "core",
                "kind": "library",
                "src": ["core/src"],
                "include": ["core/include"],
                "defines": ["CORE=1"],
                "links": ["m"],
            },
            {
                "name": "util",
                "kind": "library",
                "src": ["util/src"],
                "include": ["util/include"],
                "depends": ["core"],
            },
            {
                "name": "app",
                "kind": "executable",
                "src": ["app/src"],
                "include": ["app/include"],
                "defines": ["APP"],
                "links": ["pthread"],
                "depends": ["util"],
                "default": True,
            },
            {
                "name": "tool",
                "kind": "executable",
                "src": ["tool/tool.c"],
                "default": True,
            },
        ],
    })
