import pytest

from fakes import FakeGitHub
from repo_indexer.domain.entities import RepositoryReport
from repo_indexer.domain.exceptions import NetworkFailureError
from repo_indexer.services.content_fetcher import ContentFetcher
from repo_indexer.services.tree_builder import TreeBuilder

DEEP_PATH = "a/b/c/d/e/f/g/h/i/j/deep.py"


@pytest.fixture
def deep_github():
    github = FakeGitHub()
    github.add_files("octocat/deep", {DEEP_PATH: "x = 1\n"})
    return github


def max_levels(nodes):
    return max((node.depth() for node in nodes), default=0)


async def test_builds_nested_structure_in_listing_order(fetcher):
    tree = await TreeBuilder(fetcher).build_tree("octocat", "hello")

    assert [n.name for n in tree] == ["README.md", "main.py", "src", "docs"]
    src = tree[2]
    assert src.type == "dir"
    assert [c.path for c in src.children] == ["src/lib.rs", "src/util"]
    assert [c.path for c in src.children[1].children] == ["src/util/helpers.go"]
    assert tree[0].children is None


async def test_recursion_stops_below_depth_three(deep_github):
    tree = await TreeBuilder(ContentFetcher(deep_github)).build_tree("octocat", "deep")

    assert max_levels(tree) == 4
    d = tree[0].children[0].children[0].children[0]
    assert d.path == "a/b/c/d"
    assert d.children is None
    assert len(deep_github.calls_of("contents")) == 4


async def test_hard_ceiling_holds_even_with_deeper_recursion_allowed(deep_github):
    builder = TreeBuilder(ContentFetcher(deep_github), max_depth=5, max_recursion_depth=10)

    tree = await builder.build_tree("octocat", "deep")

    assert max_levels(tree) <= 5
    assert len(deep_github.calls_of("contents")) == 5


async def test_call_at_ceiling_returns_nothing(deep_github):
    assert await TreeBuilder(ContentFetcher(deep_github)).build_tree("octocat", "deep", depth=5) == []
    assert deep_github.calls == []


async def test_failing_subdirectory_becomes_empty_children(github, fetcher):
    github.failing_paths.add(("octocat/hello", "src"))
    report = RepositoryReport(full_name="octocat/hello")

    tree = await TreeBuilder(fetcher).build_tree("octocat", "hello", report=report)

    src = next(n for n in tree if n.name == "src")
    assert src.children == ()
    assert report.skipped_directories == ["src"]
    docs = next(n for n in tree if n.name == "docs")
    assert [c.name for c in docs.children] == ["guide.md"]


async def test_root_listing_failure_propagates(github, fetcher):
    github.failing_repos.add("octocat/hello")

    with pytest.raises(NetworkFailureError):
        await TreeBuilder(fetcher).build_tree("octocat", "hello")


async def test_pauses_after_every_entry(fetcher):
    class CountingDelay:
        count = 0

        async def pause(self):
            CountingDelay.count += 1

    await TreeBuilder(fetcher, delay=CountingDelay()).build_tree("octocat", "hello")

    # root: 4 entries, src: 2, src/util: 1, docs: 1
    assert CountingDelay.count == 8
