"""Source-file recognition by extension."""

from __future__ import annotations

from pathlib import PurePosixPath

CODE_EXTENSIONS: frozenset[str] = frozenset(
    {
        "swift", "m", "mm", "h", "c", "cpp", "hpp",
        "py", "js", "ts", "java", "kt", "go", "rs",
    }
)

_LANGUAGE_MAP: dict[str, str] = {
    "swift": "Swift",
    "m": "Objective-C",
    "mm": "Objective-C++",
    "h": "C/C++ Header",
    "c": "C",
    "cpp": "C++",
    "hpp": "C++ Header",
    "py": "Python",
    "js": "JavaScript",
    "ts": "TypeScript",
    "java": "Java",
    "kt": "Kotlin",
    "go": "Go",
    "rs": "Rust",
}


def extension_of(filename: str) -> str:
    """Lower-cased extension without the dot (``""`` if there is none)."""
    return PurePosixPath(filename).suffix.lower().lstrip(".")


def is_code_file(filename: str) -> bool:
    return extension_of(filename) in CODE_EXTENSIONS


def detect_language(filename: str) -> str:
    return _LANGUAGE_MAP.get(extension_of(filename), "Unknown")
