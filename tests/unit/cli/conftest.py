"""Fixtures for CLI tests."""

import json

import pytest
from click.testing import CliRunner

PATHS = {
    "paths": [
        {
            "type": "Strategic Pivot",
            "nodeRefs": ["sc-tech", "ind-software", {"name": "AI Engineer", "level": 2}],
            "reasoning": "Growing demand",
            "searchQuery": "ai engineer",
        },
        {
            "type": "Direct Fit",
            "nodeRefs": ["job-web-em"],
        },
    ]
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def paths_file(tmp_path):
    f = tmp_path / "paths.json"
    f.write_text(json.dumps(PATHS))
    return str(f)
