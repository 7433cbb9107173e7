from __future__ import annotations

from ._gate import require_arch_checks_enabled
from ._utils import iter_python_files, matches_prefix, parse_imports, ship_root


def _offenders(subdir: str, forbidden: tuple[str, ...]) -> list[str]:
    root = ship_root()
    found: list[str] = []
    for file_path in iter_python_files(root / subdir):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if any(matches_prefix(item.module, prefix) for prefix in forbidden):
                found.append(f"{rel}:{item.line}: forbidden import '{item.module}'")
    return found


def test_services_do_not_import_cli_modules() -> None:
    require_arch_checks_enabled()

    offenders = _offenders("services", ("ship.cli",))
    assert not offenders, "services -> cli dependency violations:\n" + "\n".join(offenders)


def test_core_depends_on_nothing_above_it() -> None:
    require_arch_checks_enabled()

    offenders = _offenders(
        "core", ("ship.cli", "ship.services", "ship.output", "ship.platform", "typer", "rich")
    )
    assert not offenders, "core layering violations:\n" + "\n".join(offenders)


TOOL_MODULES = {
    "ship.platform.process",
    "ship.services.release.acr",
    "ship.services.release.kubectl",
}


def test_release_flow_talks_to_tools_only_through_collaborators() -> None:
    require_arch_checks_enabled()

    root = ship_root()
    flow = ("orchestrator.py", "importer.py", "builder.py", "manifests.py", "rollout.py")
    offenders: list[str] = []
    for name in flow:
        path = root / "services" / "release" / name
        for item in parse_imports(path):
            if item.module in TOOL_MODULES:
                offenders.append(f"services/release/{name}:{item.line}: '{item.module}'")

    assert not offenders, "release flow must stay tool-agnostic:\n" + "\n".join(offenders)
