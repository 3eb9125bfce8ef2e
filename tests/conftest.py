"""Test fixtures for build-tools tests."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from build_tools.models import BuildConfig, BuildRuntime, TaskDescriptor
from build_tools.registry import TaskRegistry
from build_tools.signals import Immediate


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging setup so caplog sees every record."""
    package_logger = logging.getLogger("build_tools")
    output_logger = logging.getLogger("build_tools.output")
    output_logger.setLevel(logging.INFO)
    yield
    package_logger.handlers = []
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    output_logger.setLevel(logging.INFO)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def project_root(temp_dir):
    """Create a component source tree."""
    (temp_dir / "src" / "js").mkdir(parents=True)
    (temp_dir / "src" / "scss").mkdir(parents=True)
    (temp_dir / "build").mkdir()
    (temp_dir / "src" / "js" / "main.js").write_text("export default 1;\n")
    (temp_dir / "src" / "scss" / "main.scss").write_text("$x: 1;\n")
    return temp_dir


@pytest.fixture
def runtime(project_root):
    """Runtime handle rooted at the sample project."""
    return BuildRuntime(cwd=project_root)


@pytest.fixture
def config():
    """Fresh run configuration."""
    return BuildConfig()


def make_task(name, result=None, watchable=False, description=""):
    """Create a descriptor whose task returns result (called with no args if callable)."""
    def run(runtime, config):
        return result() if callable(result) else result

    return TaskDescriptor(
        name=name,
        run=run,
        watchable=watchable,
        description=description or f"{name} task"
    )


@pytest.fixture
def sample_registry():
    """Registry with a few tasks in a known order."""
    return TaskRegistry([
        make_task("build", lambda: Immediate(), watchable=True, description="Build the component"),
        make_task("verify", lambda: Immediate(), description="Lint the component"),
        make_task("a", lambda: Immediate(), description="Short name"),
    ])
