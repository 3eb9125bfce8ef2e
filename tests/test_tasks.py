"""Tests for task sources and registry loading."""

from unittest.mock import MagicMock, patch

from build_tools.constants import VERSION_COMMAND
from build_tools.models import CommandSpec, ProjectConfig
from build_tools.signals import Immediate
from build_tools.tasks import VERSION_TASK, load_plugin_tasks, load_registry

from conftest import make_task


def entry_point(name, loaded=None, error=None):
    ep = MagicMock()
    ep.name = name
    if error:
        ep.load.side_effect = error
    else:
        ep.load.return_value = loaded
    return ep


class TestVersionTask:
    """Tests for the built-in --version task."""

    def test_version_task(self, runtime, config, caplog):
        from build_tools import __version__

        result = VERSION_TASK.run(runtime, config)

        assert isinstance(result, Immediate)
        assert __version__ in caplog.text
        assert VERSION_TASK.name == VERSION_COMMAND


class TestLoadPluginTasks:
    """Tests for entry point plugins."""

    def test_descriptor_entry_point(self):
        task = make_task("demo")
        with patch("build_tools.tasks.entry_points", return_value=[entry_point("demo", task)]):
            assert load_plugin_tasks() == [task]

    def test_factory_entry_point(self):
        tasks = [make_task("demo"), make_task("docs")]
        with patch("build_tools.tasks.entry_points", return_value=[entry_point("origami", lambda: tasks)]):
            assert load_plugin_tasks() == tasks

    def test_iterable_skips_non_tasks(self, caplog):
        task = make_task("demo")
        with patch("build_tools.tasks.entry_points", return_value=[entry_point("mixed", [task, "junk"])]):
            assert load_plugin_tasks() == [task]
        assert "Ignoring non-task" in caplog.text

    def test_broken_plugin_skipped(self, caplog):
        good = make_task("demo")
        eps = [entry_point("broken", error=ImportError("no module")), entry_point("good", good)]
        with patch("build_tools.tasks.entry_points", return_value=eps):
            assert load_plugin_tasks() == [good]
        assert "Could not load task plugin broken" in caplog.text

    def test_plugin_without_tasks(self, caplog):
        with patch("build_tools.tasks.entry_points", return_value=[entry_point("empty", 42)]):
            assert load_plugin_tasks() == []
        assert "did not provide any tasks" in caplog.text


class TestLoadRegistry:
    """Tests for load_registry."""

    def test_version_always_first(self):
        registry = load_registry(include_plugins=False)
        assert [d.name for d in registry.list_all()] == [VERSION_COMMAND]

    def test_project_commands_registered(self):
        project = ProjectConfig(commands=[
            CommandSpec(name="lint", run="eslint src", description="Lint"),
            CommandSpec(name="sass", run="sass src/main.scss", watchable=True),
        ])

        registry = load_registry(project, include_plugins=False)

        assert [d.name for d in registry.list_all()] == [VERSION_COMMAND, "lint", "sass"]
        assert registry.get("sass").watchable is True

    def test_plugins_before_project_commands(self):
        project = ProjectConfig(commands=[CommandSpec(name="lint", run="eslint src")])
        with patch("build_tools.tasks.entry_points", return_value=[entry_point("demo", make_task("demo"))]):
            registry = load_registry(project)

        assert [d.name for d in registry.list_all()] == [VERSION_COMMAND, "demo", "lint"]

    def test_duplicate_names_skipped(self, caplog):
        """The first task registered under a name wins."""
        plugin = make_task("lint", description="Plugin lint")
        project = ProjectConfig(commands=[CommandSpec(name="lint", run="eslint src")])
        with patch("build_tools.tasks.entry_points", return_value=[entry_point("lint", plugin)]):
            registry = load_registry(project)

        assert registry.get("lint") is plugin
        assert "already exists" in caplog.text
