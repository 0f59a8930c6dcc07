"""PR template lookup.

Templates are markdown files found by name across a fixed search order, or
read from an explicit path. Several directories can also be searched
concurrently with results reported in input order.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from git_scribe.errors import ContentError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_NAME = "default"
DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "ai" / "built_in" / "pr_template.md"
TEMPLATE_EXTENSIONS = (".md", ".txt", "")
LISTED_EXTENSIONS = {".md", ".txt", ".tmpl"}
MAX_WORKERS = 8


@dataclass
class TemplateResult:
    """Outcome of loading one template from one directory."""

    dir_path: str
    content: str = ""
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_path(value: str) -> bool:
    return "/" in value or "\\" in value


def _search_dirs(templates_dir: str, root: Path) -> list[Path]:
    """Directories searched for a template name, in order."""
    return [
        root,
        root / templates_dir,
        root / ".github" / templates_dir,
        root / ".gitlab" / templates_dir,
    ]


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ContentError(
            f"failed to read template file {path}",
            component="templates",
            path=str(path),
            cause=e,
        ) from e


def default_template() -> str:
    """The bundled default PR template."""
    return DEFAULT_TEMPLATE_PATH.read_text(encoding="utf-8")


def load_template(
    name: str,
    templates_dir: str = "templates",
    root: Path | None = None,
    fallback_to_default: bool = True,
) -> str:
    """Load a PR template by name or path.

    A value containing a path separator is read directly. Otherwise the
    extensions ``.md``, ``.txt`` and none are tried in turn, each across the
    working directory, ``<templates_dir>``, ``.github/<templates_dir>`` and
    ``.gitlab/<templates_dir>``.

    Args:
        name: Template name or file path
        templates_dir: Templates directory, relative to ``root``
        root: Base directory of the search (defaults to the working directory)
        fallback_to_default: Use the bundled template when ``name`` is
            ``default`` and no file is found

    Returns:
        Template text

    Raises:
        ContentError: If the template cannot be found or read
    """
    if _is_path(name):
        path = Path(name).expanduser()
        if not path.is_file():
            raise ContentError(
                f"template file {name} not found", component="templates", path=name
            )
        return _read(path)

    base = root or Path.cwd()
    for ext in TEMPLATE_EXTENSIONS:
        for directory in _search_dirs(templates_dir, base):
            candidate = directory / f"{name}{ext}"
            if candidate.is_file():
                logger.debug(f"Using template {candidate}")
                return _read(candidate)

    if fallback_to_default and name == DEFAULT_TEMPLATE_NAME:
        logger.debug("No default template on disk, using built-in template")
        return default_template()

    raise ContentError(
        f"template '{name}' not found in {templates_dir} directory",
        component="templates",
    )


def list_templates(templates_dir: str = "templates", root: Path | None = None) -> list[str]:
    """Names of the templates available in the template directories."""
    base = root or Path.cwd()
    names: set[str] = set()
    for directory in _search_dirs(templates_dir, base)[1:]:
        if not directory.is_dir():
            continue
        for path in directory.iterdir():
            if path.is_file() and path.suffix.lower() in LISTED_EXTENSIONS:
                names.add(path.stem)
    return sorted(names)


def create_default_template(
    templates_dir: str = "templates", root: Path | None = None
) -> Path:
    """Write ``default.md`` into the templates directory unless it exists.

    Returns:
        Path of the default template
    """
    directory = (root or Path.cwd()) / templates_dir
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / f"{DEFAULT_TEMPLATE_NAME}.md"
    if not path.exists():
        path.write_text(default_template(), encoding="utf-8")
        logger.info(f"Created default template at {path}")
    return path


def _load_parallel(
    dir_paths: list[str], loader: Callable[[str], str]
) -> list[TemplateResult]:
    """Run ``loader`` for every directory concurrently.

    Each result is stored at the index of its directory, so the output order
    matches the input order whatever order the lookups finish in.
    """
    if not dir_paths:
        return []

    results: list[TemplateResult] = [TemplateResult(dir_path=d) for d in dir_paths]
    lock = threading.Lock()

    def worker(index: int, dir_path: str) -> None:
        try:
            result = TemplateResult(dir_path=dir_path, content=loader(dir_path))
        except ContentError as e:
            result = TemplateResult(dir_path=dir_path, error=e)

        with lock:
            results[index] = result

    with ThreadPoolExecutor(max_workers=min(len(dir_paths), MAX_WORKERS)) as executor:
        futures = [
            executor.submit(worker, index, dir_path)
            for index, dir_path in enumerate(dir_paths)
        ]
        for future in futures:
            future.result()

    return results


def load_templates_parallel(
    dir_paths: list[str], name: str, root: Path | None = None
) -> list[TemplateResult]:
    """Look up template ``name`` in several template directories at once."""
    return _load_parallel(
        dir_paths,
        lambda dir_path: load_template(
            name, templates_dir=dir_path, root=root, fallback_to_default=False
        ),
    )


def load_files_from_dirs(dir_paths: list[str], file_name: str) -> list[TemplateResult]:
    """Read ``file_name`` from each directory at once."""

    def read_file(dir_path: str) -> str:
        path = Path(dir_path).expanduser() / file_name
        if not path.is_file():
            raise ContentError(
                f"{file_name} not found in {dir_path}",
                component="templates",
                path=str(path),
            )
        return _read(path)

    return _load_parallel(dir_paths, read_file)


def successful_contents(results: list[TemplateResult]) -> list[str]:
    """Contents of the lookups that succeeded, in input order."""
    return [r.content for r in results if r.ok]


def has_errors(results: list[TemplateResult]) -> bool:
    return any(not r.ok for r in results)


def collect_errors(results: list[TemplateResult]) -> list[str]:
    """One ``<dir>: <error>`` line per failed lookup."""
    return [f"{r.dir_path}: {r.error}" for r in results if not r.ok]
