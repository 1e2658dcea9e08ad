"""Tests for the deprecation engine."""

from pathlib import Path

import pytest

from deprecheck.config.models import DeprecheckConfig, DiagnosticsConfig
from deprecheck.diagnostics import DiagnosticResult
from deprecheck.engine import DeprecationEngine, find_project_root, iter_source_files
from deprecheck.types import FileChangeEvent, FileChangeType


@pytest.fixture
def engine(workspace: Path) -> DeprecationEngine:
    return DeprecationEngine(DeprecheckConfig(), workspace)


class TestFindProjectRoot:
    def test_given_package_json_then_its_directory(self, workspace: Path) -> None:
        nested = workspace / "src"
        assert find_project_root(nested) == workspace

    def test_given_style_dir_with_stylesheet_then_parent(self, tmp_path: Path) -> None:
        (tmp_path / "app" / "styles").mkdir(parents=True)
        (tmp_path / "app" / "styles" / "main.scss").write_text("")
        (tmp_path / "app" / "pages").mkdir()
        assert find_project_root(tmp_path / "app" / "pages") == tmp_path / "app"

    def test_given_no_markers_then_start(self, tmp_path: Path) -> None:
        start = tmp_path / "plain"
        start.mkdir()
        # tmp_path ancestors carry no markers on a clean test machine
        assert find_project_root(start) in (start, *start.parents)


class TestIterSourceFiles:
    def test_yields_supported_files_outside_excluded_dirs(self, workspace: Path) -> None:
        (workspace / "node_modules" / "pkg").mkdir(parents=True)
        (workspace / "node_modules" / "pkg" / "index.js").write_text("")
        (workspace / "notes.txt").write_text("")
        found = [p.relative_to(workspace).as_posix() for p in iter_source_files(workspace, ["node_modules"])]
        assert found == ["src/App.tsx", "src/styles.css"]


class TestRefreshAndValidate:
    @pytest.mark.asyncio
    async def test_refresh_loads_declarations(self, engine: DeprecationEngine) -> None:
        count = await engine.refresh()
        assert count == 1
        assert engine.cache.get("btn-old") is not None

    @pytest.mark.asyncio
    async def test_validate_reports_usage_positions(self, engine: DeprecationEngine) -> None:
        await engine.refresh()
        result = engine.validate("/x/App.tsx", '<b className="btn-old">')
        assert [(u.class_name, u.line, u.start_char) for u in result.usages] == [("btn-old", 0, 14)]
        assert result.analysis_time_ms is not None

    @pytest.mark.asyncio
    async def test_validate_skips_unsupported_files(self, engine: DeprecationEngine) -> None:
        await engine.refresh()
        assert engine.validate("/x/notes.md", 'class="btn-old"').usages == ()

    @pytest.mark.asyncio
    async def test_validate_returns_nothing_when_disabled(self, workspace: Path) -> None:
        config = DeprecheckConfig(diagnostics=DiagnosticsConfig(enable=False))
        engine = DeprecationEngine(config, workspace)
        await engine.refresh()
        assert engine.validate("/x/App.tsx", '<b className="btn-old">').usages == ()

    @pytest.mark.asyncio
    async def test_refresh_without_root_is_noop(self) -> None:
        engine = DeprecationEngine(DeprecheckConfig())
        assert await engine.refresh() == 0
        assert engine.check_workspace() == []


class TestCheckWorkspace:
    @pytest.mark.asyncio
    async def test_returns_only_files_with_usages(
        self, engine: DeprecationEngine, workspace: Path
    ) -> None:
        await engine.refresh()
        results = engine.check_workspace()
        assert [Path(r.path) for r in results] == [workspace / "src" / "App.tsx"]
        [usage] = results[0].usages
        assert (usage.line, usage.start_char, usage.end_char) == (1, 21, 28)


class TestOpenDocuments:
    @pytest.mark.asyncio
    async def test_cache_change_revalidates_open_documents(self, workspace: Path) -> None:
        # Given
        published: list[DiagnosticResult] = []
        engine = DeprecationEngine(DeprecheckConfig(), workspace, on_diagnostics=published.append)
        await engine.refresh()
        engine.open_document("/x/Card.tsx", '<div className="card-legacy">')
        assert published[-1].usages == ()

        # When: a stylesheet starts deprecating card-legacy
        css = workspace / "src" / "cards.css"
        css.write_text('.card-legacy { --deprecated: "Use .card"; }')
        engine.handle_file_changes([FileChangeEvent(str(css), FileChangeType.CREATED)])

        # Then
        assert [u.class_name for u in published[-1].usages] == ["card-legacy"]
        assert published[-1].path == "/x/Card.tsx"

    @pytest.mark.asyncio
    async def test_closed_documents_are_not_revalidated(self, workspace: Path) -> None:
        published: list[DiagnosticResult] = []
        engine = DeprecationEngine(DeprecheckConfig(), workspace, on_diagnostics=published.append)
        engine.open_document("/x/A.tsx", "")
        engine.close_document("/x/A.tsx")
        published.clear()

        await engine.refresh()

        assert published == []
        assert engine.open_documents == []

    def test_non_stylesheet_events_are_ignored(self, engine: DeprecationEngine) -> None:
        applied = engine.handle_file_changes(
            [FileChangeEvent("/x/App.tsx", FileChangeType.CHANGED)]
        )
        assert applied == 0

    @pytest.mark.asyncio
    async def test_close_detaches_from_cache(self, workspace: Path) -> None:
        published: list[DiagnosticResult] = []
        engine = DeprecationEngine(DeprecheckConfig(), workspace, on_diagnostics=published.append)
        engine.open_document("/x/A.tsx", "")
        engine.close()
        published.clear()

        await engine.refresh()

        assert published == []
