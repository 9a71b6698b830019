"""
Structure lint tests.
Verify that the component skeleton exists and follows conventions.
"""

from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE = PROJECT_ROOT / "jaothui"
COMPONENTS = ["animals", "auth", "farms", "microchip", "recurrence", "schedules", "uploads"]


class TestProjectStructure:
    def test_layer_directories_exist(self) -> None:
        for layer in ("domain", "rules", "components", "adapters", "app_shell", "api"):
            assert (PACKAGE / layer).is_dir(), f"Missing layer {layer}"

    def test_components_follow_layout(self) -> None:
        """Each component ships models, ports, an entry point and unit tests."""
        for name in COMPONENTS:
            component = PACKAGE / "components" / name
            for module in ("__init__.py", "models.py", "ports.py", "component.py"):
                assert (component / module).is_file(), f"{name} is missing {module}"
            assert (component / "tests" / "test_unit.py").is_file()

    def test_init_files_present(self) -> None:
        packages = [
            "jaothui",
            "jaothui/domain",
            "jaothui/rules",
            "jaothui/components",
            "jaothui/adapters",
            "jaothui/adapters/sqlite",
            "jaothui/adapters/fs",
            "jaothui/adapters/auth",
            "jaothui/app_shell",
            "jaothui/api",
            "jaothui/api/routes",
        ]
        for pkg in packages:
            init_file = PROJECT_ROOT / pkg / "__init__.py"
            assert init_file.is_file(), f"Missing __init__.py in {pkg}"

    def test_migrations_ordered(self) -> None:
        names = sorted(p.name for p in (PROJECT_ROOT / "migrations").glob("*.sql"))
        assert names[0] == "001_initial.sql"
        assert all(name[:3].isdigit() for name in names)

    def test_rules_file_present(self) -> None:
        assert (PROJECT_ROOT / "rules.yaml").is_file()
