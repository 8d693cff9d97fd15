import pytest

from fakes import FakeGitHub
from repo_indexer.domain.entities import FileTreeNode, RepositoryReport
from repo_indexer.services.code_extractor import CodeFileExtractor
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.language_detection import detect_language, is_code_file
from repo_indexer.services.tree_builder import TreeBuilder


async def build_and_extract(github, full_name, **kwargs):
    owner, repo = full_name.split("/")
    fetcher = ContentFetcher(github)
    tree = await TreeBuilder(fetcher).build_tree(owner, repo)
    report = RepositoryReport(full_name=full_name)
    files = await CodeFileExtractor(fetcher, **kwargs).extract(owner, repo, tree, report)
    return files, report


async def test_extracts_recognised_files_depth_first(github):
    files, _ = await build_and_extract(github, "octocat/hello")

    assert [f.path for f in files] == ["main.py", "src/lib.rs", "src/util/helpers.go"]
    assert [f.language for f in files] == ["Python", "Rust", "Go"]
    assert files[0].content == "print('hi')\n"
    assert files[0].size == len("print('hi')\n")


async def test_unrecognised_extensions_never_collected():
    github = FakeGitHub()
    github.add_files(
        "octocat/mixed",
        {
            "notes.md": "n",
            "Makefile": "all:",
            "data/config.json": "{}",
            "app/View.swift": "struct V {}",
            "app/icon.png": "png",
            "scripts/run.sh": "echo",
        },
    )

    files, _ = await build_and_extract(github, "octocat/mixed")

    assert [f.path for f in files] == ["app/View.swift"]


async def test_cap_limits_collected_files():
    github = FakeGitHub()
    github.add_files("octocat/big", {f"pkg{i // 20}/mod{i}.py": f"# {i}" for i in range(80)})

    files, _ = await build_and_extract(github, "octocat/big")

    assert len(files) == 50
    fetched = [c for c in github.calls_of("contents") if str(c[2]).endswith(".py")]
    assert len(fetched) == 50


async def test_directories_still_walked_after_cap():
    tree = [
        FileTreeNode(name="a.py", path="a.py", type="file", size=1),
        FileTreeNode(
            name="pkg",
            path="pkg",
            type="dir",
            children=(FileTreeNode(name="b.py", path="pkg/b.py", type="file", size=1),),
        ),
    ]
    visited = []

    class Recorder:
        async def fetch_file_content(self, owner, repo, path):
            visited.append(path)
            return "x"

    extractor = CodeFileExtractor(Recorder(), max_files=1)
    files = await extractor.extract("o", "r", tree)

    assert [f.path for f in files] == ["a.py"]
    assert visited == ["a.py"]


async def test_single_failing_file_is_skipped(github):
    github.failing_paths.add(("octocat/hello", "src/lib.rs"))

    files, report = await build_and_extract(github, "octocat/hello")

    assert [f.path for f in files] == ["main.py", "src/util/helpers.go"]
    assert report.skipped_files == ["src/lib.rs"]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("App.swift", True),
        ("bridge.MM", True),
        ("header.hpp", True),
        ("index.tsx", False),
        ("README", False),
        (".gitignore", False),
    ],
)
def test_is_code_file(name, expected):
    assert is_code_file(name) is expected


def test_detect_language():
    assert detect_language("Foo.m") == "Objective-C"
    assert detect_language("types.h") == "C/C++ Header"
    assert detect_language("notes.txt") == "Unknown"
