"""End-to-end test running the reporter against a sample project."""
# ruff: noqa: S603

import subprocess
import sys
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Create a project with code, annotated tests and a reporter config."""
    project = tmp_path / "sample"
    (project / "checks").mkdir(parents=True)
    (project / "pyproject.toml").write_text('[project]\nname = "sample"\n')
    (project / "calc.py").write_text(
        textwrap.dedent(
            """
            def add(a, b):
                return a + b


            def unused():
                return None
            """
        )
    )
    (project / "checks" / "test_calc.py").write_text(
        textwrap.dedent(
            '''
            import pytest

            from calc import add


            def test_add():
                """
                @description: adds numbers
                @author: alice
                @date: 2023/5/14 18:30
                """
                assert add(1, 2) == 3


            # @description: broken on purpose
            # @author: bob
            @pytest.mark.parametrize("value", [1, 2])
            def test_broken(value):
                assert value == 1
            '''
        )
    )
    (project / ".test-reporter.yaml").write_text(
        textwrap.dedent(
            """
            vet_command: ["{python}", "-c", "print('ANALYZER OK')"]
            table_width: 200
            """
        )
    )
    return project


def _run_reporter(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "boostsec.test_reporter.cli", *args],
        capture_output=True,
        text=True,
        check=False,
        timeout=300,
    )


def test_reporter_all_sections(sample_project: Path) -> None:
    """The reporter runs tests under coverage and renders every section."""
    result = _run_reporter("--project-dir", str(sample_project))

    assert result.returncode == 0, result.stderr
    out = result.stdout
    assert "calc.py" in out
    assert "Package" in out
    assert "sample/checks" in out
    assert "adds numbers" in out
    assert "broken on purpose(1)" in out
    assert "broken on purpose(2)" in out
    assert "alice" in out
    assert "total 3" in out
    assert "pass 2,fail 1" in out
    assert out.index("calc.py") < out.index("Package") < out.index("ANALYZER OK")


def test_reporter_strict_output_file(sample_project: Path) -> None:
    """With --strict the failing test sets the exit code."""
    report = sample_project.parent / "report.txt"

    result = _run_reporter(
        "-t", "t", "--project-dir", str(sample_project), "-o", str(report), "--strict"
    )

    assert result.returncode == 1
    text = report.read_text()
    assert "pass 2,fail 1" in text
    assert "calc.py" not in text
    assert "ANALYZER OK" not in text


def test_reporter_vet_only(sample_project: Path) -> None:
    """The vet report only runs the analyzer."""
    result = _run_reporter("-t", "v", "--project-dir", str(sample_project))

    assert result.returncode == 0, result.stderr
    assert result.stdout == "ANALYZER OK\n"
