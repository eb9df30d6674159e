"""Extract descriptive metadata from the documentation of test functions.

Test functions are documented with ``@key: value`` lines in their docstring
or, when they have none, in the ``#`` comment block right above them::

    def test_login() -> None:
        '''
        @description: logs in with a valid password
        @author: alice
        @date: 2023/5/14 18:30
        '''

The declaring function's identifier is always the lookup key of the
resulting metadata. An ``@name`` annotation is kept on the record as
``annotated_name`` but never used for lookups.
"""

import ast
import fnmatch
import logging
import os
import tokenize
from collections.abc import Iterator, Sequence
from pathlib import Path

from pydantic import ValidationError

from boostsec.test_reporter.errors import MetadataError
from boostsec.test_reporter.models.annotation import (
    ANNOTATION_KEYS,
    Annotation,
    annotation_adapter,
)
from boostsec.test_reporter.models.reporter_config import DEFAULT_EXCLUDE_DIRS
from boostsec.test_reporter.models.test_metadata import MetadataIndex, TestMetadata
from boostsec.test_reporter.project import logical_package_path

logger = logging.getLogger(__name__)

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef

_FIELD_BY_KEY = {
    "@date": "date",
    "@name": "annotated_name",
    "@description": "description",
    "@author": "author",
}


def parse_annotations(text: str) -> list[Annotation]:
    """Parse the annotation lines of a documentation comment.

    Args:
        text: Documentation text with comment markers already removed

    Returns:
        Recognized annotations in order of appearance

    Raises:
        MetadataError: If a recognized annotation has an invalid value

    """
    annotations: list[Annotation] = []

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue

        key, separator, value = line.partition(":")
        if not separator:
            continue

        key, value = key.strip(), value.strip()
        if key not in ANNOTATION_KEYS:
            continue

        try:
            annotation = annotation_adapter.validate_python(
                {"key": key, "value": value}
            )
        except ValidationError as e:
            raise MetadataError(f"Invalid {key} annotation {value!r}: {e}") from e
        annotations.append(annotation)

    return annotations


def build_metadata(
    name: str, package_path: str, annotations: Sequence[Annotation]
) -> TestMetadata | None:
    """Build the metadata of a test function from its annotations.

    Returns None when no annotation was recognized. Repeated keys keep the
    last value.
    """
    if not annotations:
        return None

    fields: dict[str, object] = {}
    for annotation in annotations:
        fields[_FIELD_BY_KEY[annotation.key]] = annotation.value

    return TestMetadata(name=name, package_path=package_path, **fields)


def extract_file_metadata(
    path: Path, package_path: str, function_prefix: str = "test"
) -> list[TestMetadata]:
    """Extract metadata of the documented test functions of one file.

    Raises:
        MetadataError: If the file cannot be decoded or parsed, or an
            annotation is invalid

    """
    try:
        with tokenize.open(path) as f:
            source = f.read()
        tree = ast.parse(source, filename=str(path))
    except (SyntaxError, UnicodeDecodeError, ValueError) as e:
        raise MetadataError(f"Failed to parse {path}: {e}") from e

    lines = source.splitlines()
    infos: list[TestMetadata] = []

    for name, node in _test_functions(tree, function_prefix):
        text = _documentation(node, lines)
        if not text:
            continue

        try:
            info = build_metadata(name, package_path, parse_annotations(text))
        except MetadataError as e:
            raise MetadataError(f"{path}:{node.lineno} {name}: {e}") from e

        if info is not None:
            infos.append(info)

    return infos


def iter_test_files(
    root: Path,
    patterns: Sequence[str] = ("test_*.py", "*_test.py"),
    exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
) -> Iterator[Path]:
    """Yield test files below root in lexicographic walk order."""
    excluded = set(exclude_dirs)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if not d.startswith(".") and d not in excluded
        )
        for filename in sorted(filenames):
            if any(fnmatch.fnmatch(filename, pattern) for pattern in patterns):
                yield Path(dirpath) / filename


def extract_metadata(
    root: Path,
    module: str,
    patterns: Sequence[str] = ("test_*.py", "*_test.py"),
    function_prefix: str = "test",
    exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
) -> MetadataIndex:
    """Build the metadata lookup of every documented test below root.

    Args:
        root: Directory to scan
        module: Module identity prefixed to every package path
        patterns: Glob patterns of test file names
        function_prefix: Name prefix of test functions
        exclude_dirs: Directory names that are never scanned

    Returns:
        Mapping of logical package path to test name to metadata

    Raises:
        MetadataError: If root is not a directory or any test file is invalid

    """
    if not root.is_dir():
        raise MetadataError(f"Source directory not found: {root}")

    index: MetadataIndex = {}
    scanned = 0

    for path in iter_test_files(root, patterns, exclude_dirs):
        scanned += 1
        relative_dir = path.parent.relative_to(root).as_posix()
        package_path = logical_package_path(module, relative_dir)

        for info in extract_file_metadata(path, package_path, function_prefix):
            index.setdefault(package_path, {})[info.name] = info

    documented = sum(len(tests) for tests in index.values())
    logger.info(f"Scanned {scanned} test files, found {documented} documented tests")
    return index


def _test_functions(
    tree: ast.Module, function_prefix: str
) -> Iterator[tuple[str, FunctionNode]]:
    """Yield top-level test functions and methods of top-level test classes."""
    for node in tree.body:
        if isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
            if node.name.startswith(function_prefix):
                yield node.name, node
        elif isinstance(node, ast.ClassDef) and node.name.startswith("Test"):
            for child in node.body:
                if isinstance(
                    child, ast.FunctionDef | ast.AsyncFunctionDef
                ) and child.name.startswith(function_prefix):
                    yield f"{node.name}.{child.name}", child


def _documentation(node: FunctionNode, lines: Sequence[str]) -> str | None:
    """Return the docstring of node, or the comment block right above it."""
    docstring = ast.get_docstring(node)
    if docstring:
        return docstring

    first_line = min([node.lineno] + [d.lineno for d in node.decorator_list])
    comment: list[str] = []
    index = first_line - 2
    while index >= 0:
        stripped = lines[index].strip()
        if not stripped.startswith("#"):
            break
        comment.append(stripped.lstrip("#"))
        index -= 1

    if not comment:
        return None
    return "\n".join(reversed(comment))
