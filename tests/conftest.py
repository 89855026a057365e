import copy
import json
from unittest.mock import patch

import pytest

from export_samples import ARRAY_EXPORT, FLAGGED_EXPORT


@pytest.fixture(scope="session", autouse=True)
def prevent_logging_reconfiguration():
    """Prevent the application from reconfiguring logging during tests."""
    with patch("ncdu_view.main.setup_logging"):
        yield


@pytest.fixture
def flagged_export():
    return copy.deepcopy(FLAGGED_EXPORT)


@pytest.fixture
def array_export():
    return copy.deepcopy(ARRAY_EXPORT)


@pytest.fixture(params=["flagged", "array"])
def any_export(request):
    """Each test using this runs once per export layout."""
    source = FLAGGED_EXPORT if request.param == "flagged" else ARRAY_EXPORT
    return json.dumps(source)


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(FLAGGED_EXPORT), encoding="utf-8")
    return path
