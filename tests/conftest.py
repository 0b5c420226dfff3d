# --- test import path bootstrap (src/ layout) ---
import sys as _sys
from pathlib import Path as _Path

_SRC = _Path(__file__).resolve().parents[1] / "src"
if _SRC.is_dir():
    _p = str(_SRC)
    if _p not in _sys.path:
        _sys.path.insert(0, _p)
# --- end bootstrap ---

import json
import sys
import tempfile
from pathlib import Path

import pytest

from featurekeeper.admin.memory import InMemoryFeatureAdmin
from featurekeeper.catalog import metadata_version as mvc


def build_admin_client(**kwargs) -> InMemoryFeatureAdmin:
    """foo.bar 0..10 at 5; metadata.version 3.3-IV0..3.3-IV3 at 3.3-IV2; epoch 123."""
    return InMemoryFeatureAdmin.from_levels(
        min_levels={mvc.FEATURE_NAME: mvc.IBP_3_3_IV0.feature_level, "foo.bar": 0},
        finalized_levels={mvc.FEATURE_NAME: mvc.IBP_3_3_IV2.feature_level, "foo.bar": 5},
        max_levels={mvc.FEATURE_NAME: mvc.IBP_3_3_IV3.feature_level, "foo.bar": 10},
        epoch=kwargs.pop("epoch", 123),
        **kwargs,
    )


@pytest.fixture
def admin() -> InMemoryFeatureAdmin:
    return build_admin_client()


@pytest.fixture
def controller_admin() -> InMemoryFeatureAdmin:
    """A controller-attributed cluster finalized at 3.3-IV1 with the full catalog range."""
    return InMemoryFeatureAdmin.from_levels(
        min_levels={
            mvc.FEATURE_NAME: mvc.MINIMUM_KRAFT_VERSION.feature_level,
            "group.version": 0,
            "kraft.version": 0,
            "transaction.version": 0,
        },
        finalized_levels={mvc.FEATURE_NAME: mvc.IBP_3_3_IV1.feature_level},
        max_levels={
            mvc.FEATURE_NAME: mvc.LATEST_TESTING.feature_level,
            "group.version": 1,
            "kraft.version": 1,
            "transaction.version": 2,
        },
        controller_id=3000,
        epoch=7,
    )


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    path = tmp_path / "cluster.json"
    path.write_text(
        json.dumps(
            {
                "schema_version": "cluster_features.v1",
                "epoch": 123,
                "features": {
                    "foo.bar": {"min": 0, "max": 10, "finalized": 5},
                    "metadata.version": {"min": 4, "max": 7, "finalized": 6},
                },
            },
            indent=2,
            sort_keys=True,
        )
        + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def fk_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    local = repo_root / ".venv" / "bin" / "fk"
    if local.exists():
        return local

    # Use a repo-local shim when local venv entrypoint is unavailable.
    shim_dir = Path(tempfile.mkdtemp(prefix="fk-shim-"))
    shim = shim_dir / "fk"
    shim.write_text(
        f"""#!/usr/bin/env bash
set -Eeuo pipefail
export PYTHONPATH=\"{repo_root}/src${{PYTHONPATH:+:${{PYTHONPATH}}}}\"
exec \"{sys.executable}\" -c 'import sys; from featurekeeper.cli import main; raise SystemExit(main())' \"$@\"
""",
        encoding="utf-8",
    )
    shim.chmod(0o755)
    return shim
