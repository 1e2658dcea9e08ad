"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local deprecheck package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of deprecheck modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("deprecheck"):
        del sys.modules[module_name]

from deprecheck.types import DeprecatedClass  # noqa: E402


@pytest.fixture
def make_deprecated() -> Callable[..., DeprecatedClass]:
    """Factory for DeprecatedClass records with sensible defaults."""

    def _make(
        class_name: str,
        message: str = "deprecated",
        source_file: str = "/proj/styles.css",
        line: int | None = 1,
    ) -> DeprecatedClass:
        return DeprecatedClass(
            class_name=class_name, message=message, source_file=source_file, line=line
        )

    return _make


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A small web project with one deprecated class and one usage."""
    root = tmp_path / "web"
    (root / "src").mkdir(parents=True)
    (root / "package.json").write_text("{}")
    (root / "src" / "styles.css").write_text(
        '.btn-old {\n  --deprecated: "Use .btn-primary instead";\n  color: red;\n}\n'
    )
    (root / "src" / "App.tsx").write_text(
        "export const App = () => (\n"
        '  <button className="btn-old large">Go</button>\n'
        ");\n"
    )
    return root
