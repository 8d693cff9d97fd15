"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Principal:
    """The authenticated GitHub user."""

    login: str
    id: int
    avatar_url: str = ""
    name: str | None = None
    email: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0


@dataclass(frozen=True, slots=True, eq=False)
class RepositorySummary:
    """One repository owned by the authenticated user.

    Two summaries are equal when they share the numeric GitHub id, whatever
    the other fields say.
    """

    id: int
    name: str
    full_name: str
    html_url: str
    owner_login: str
    created_at: str
    updated_at: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    topics: tuple[str, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepositorySummary):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True)
class ContentEntry:
    """A single entry from the repository contents API."""

    name: str
    path: str
    type: str  # "file", "dir", "symlink" or "submodule"
    size: int | None = None
    content: str | None = None  # base64, files only

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"

    @property
    def is_file(self) -> bool:
        return self.type == "file"


@dataclass(frozen=True, slots=True)
class FileTreeNode:
    """A node of the in-memory mirror of a repository's directory structure.

    ``children`` is ``None`` for files and for directories that were not
    explored; an explored directory always carries a tuple (possibly empty).
    """

    name: str
    path: str
    type: str
    size: int | None = None
    children: tuple[FileTreeNode, ...] | None = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    def depth(self) -> int:
        """Number of levels in the subtree rooted at this node (a leaf is 1)."""
        if not self.children:
            return 1
        return 1 + max(child.depth() for child in self.children)


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Decoded text content of one recognised source file."""

    path: str
    name: str
    language: str
    content: str
    size: int = 0


@dataclass(frozen=True, slots=True)
class RepositoryDocumentationRecord:
    """Everything generated for one repository."""

    id: str
    name: str
    full_name: str
    description: str
    url: str
    owner: str
    stars: int
    forks: int
    created_at: str
    updated_at: str
    language: str | None = None
    readme: str | None = None
    structure: tuple[FileTreeNode, ...] = ()
    code_files: tuple[SourceFile, ...] = ()
    topics: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DocumentationDatabase:
    """The aggregate document persisted at the end of a generation run."""

    version: str
    generated_at: str
    user: str
    repository_count: int
    repositories: tuple[RepositoryDocumentationRecord, ...]

    def __post_init__(self) -> None:
        if self.repository_count != len(self.repositories):
            msg = (
                f"repository_count={self.repository_count} does not match "
                f"{len(self.repositories)} repositories"
            )
            raise ValueError(msg)

    @classmethod
    def create(
        cls,
        *,
        version: str,
        generated_at: str,
        user: str,
        repositories: list[RepositoryDocumentationRecord],
    ) -> DocumentationDatabase:
        records = tuple(repositories)
        return cls(
            version=version,
            generated_at=generated_at,
            user=user,
            repository_count=len(records),
            repositories=records,
        )


# ── Run reporting ───────────────────────────────────────────────────────────


@dataclass(slots=True)
class RepositoryReport:
    """Recoverable problems met while documenting one repository."""

    full_name: str
    skipped_files: list[str] = field(default_factory=list)
    skipped_directories: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RepositoryOutcome:
    """Terminal state of one repository within a generation run."""

    full_name: str
    succeeded: bool
    error: str | None = None
    skipped_files: tuple[str, ...] = ()
    skipped_directories: tuple[str, ...] = ()


@dataclass(slots=True)
class GenerationReport:
    """Run-level report collected alongside the database."""

    outcomes: list[RepositoryOutcome] = field(default_factory=list)
    written_to: list[str] = field(default_factory=list)
    sink_errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)
