"""Ecosystem artifact tables.

Each table lists the marker files that identify a project of one
ecosystem and the artifact names hidden when a marker is present.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ArtifactTable:
    """Marker and artifact names of one ecosystem.

    Attributes:
        ecosystem: Short ecosystem identifier.
        marker_files: Exact file names that activate the table.
        marker_extensions: File extensions that activate the table.
        folder_names: Directory names hidden when active.
        file_names: File names hidden when active.
    """

    ecosystem: str
    marker_files: tuple[str, ...] = ()
    marker_extensions: tuple[str, ...] = ()
    folder_names: frozenset[str] = field(default_factory=frozenset)
    file_names: frozenset[str] = field(default_factory=frozenset)


FRONTEND = ArtifactTable(
    ecosystem="frontend",
    marker_files=(
        "package.json",
        "package-lock.json",
        "pnpm-lock.yaml",
        "yarn.lock",
        "bun.lockb",
        "bun.lock",
        "pnpm-workspace.yaml",
        "npm-shrinkwrap.json",
    ),
    folder_names=frozenset(
        {
            "node_modules",
            "dist",
            "build",
            ".next",
            ".nuxt",
            ".turbo",
            ".svelte-kit",
            ".angular",
            "coverage",
            ".cache",
            ".parcel-cache",
            ".vite",
            ".output",
            ".astro",
            "storybook-static",
            "out",
        }
    ),
)

PYTHON = ArtifactTable(
    ecosystem="python",
    marker_files=(
        "pyproject.toml",
        "requirements.txt",
        "requirements-dev.txt",
        "setup.py",
        "setup.cfg",
        "Pipfile",
        "poetry.lock",
        "environment.yml",
    ),
    folder_names=frozenset(
        {
            "__pycache__",
            ".pytest_cache",
            ".mypy_cache",
            ".ruff_cache",
            ".tox",
            ".nox",
            ".venv",
            "venv",
            "env",
            ".hypothesis",
            ".ipynb_checkpoints",
            ".pyre",
        }
    ),
)

JVM = ArtifactTable(
    ecosystem="jvm",
    marker_files=(
        "pom.xml",
        "build.gradle",
        "build.gradle.kts",
        "settings.gradle",
        "settings.gradle.kts",
    ),
    folder_names=frozenset({"target", ".gradle", "build", "out"}),
)

GO = ArtifactTable(
    ecosystem="go",
    marker_files=("go.mod", "go.work"),
    folder_names=frozenset({"vendor", "bin"}),
)

RUBY = ArtifactTable(
    ecosystem="ruby",
    marker_files=("Gemfile", "Gemfile.lock"),
    folder_names=frozenset({".bundle", "vendor", "log", "tmp"}),
)

PHP = ArtifactTable(
    ecosystem="php",
    marker_files=("composer.json",),
    folder_names=frozenset({"vendor"}),
)

RUST = ArtifactTable(
    ecosystem="rust",
    marker_files=("Cargo.toml",),
    folder_names=frozenset({"target"}),
)

DOTNET = ArtifactTable(
    ecosystem="dotnet",
    marker_extensions=(".sln", ".csproj", ".fsproj", ".vbproj"),
    folder_names=frozenset({"bin", "obj"}),
)

# OS clutter, hidden under every root regardless of markers
COMMON_FILE_NAMES: frozenset[str] = frozenset({".ds_store", "thumbs.db", "desktop.ini"})

ECOSYSTEM_TABLES: tuple[ArtifactTable, ...] = (
    FRONTEND,
    PYTHON,
    JVM,
    GO,
    RUBY,
    PHP,
    RUST,
    DOTNET,
)
