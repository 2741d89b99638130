from __future__ import annotations

from pathlib import Path

import pytest

from relpack.test._release_tree import ReleaseTree, build_release_tree


@pytest.fixture
def release_tree(tmp_path: Path) -> ReleaseTree:
    return build_release_tree(tmp_path)
