"""
Tests for the Sphinx documentation sources under docs/.

conf.py is read with ``ast`` rather than executed, so Sphinx need not be
installed to check that every path it names exists.
"""
import ast
import re
from pathlib import Path

import pytest

DOCS = Path(__file__).resolve().parents[1] / "docs"


def conf_values():
    tree = ast.parse((DOCS / "conf.py").read_text())
    values = {}
    for node in tree.body:
        if isinstance(node, ast.Assign) and len(node.targets) == 1:
            target = node.targets[0]
            if isinstance(target, ast.Name):
                try:
                    values[target.id] = ast.literal_eval(node.value)
                except ValueError:
                    pass
    return values


def find_source(name):
    for suffix in (".rst", ".md"):
        if (DOCS / (name + suffix)).is_file():
            return DOCS / (name + suffix)
    return None


def toctree_entries(path):
    entries = []
    in_toctree = False
    for line in path.read_text().splitlines():
        if line.startswith(".. toctree::"):
            in_toctree = True
            continue
        if in_toctree:
            if line and not line.startswith(" "):
                in_toctree = False
            elif line.strip() and not line.strip().startswith(":"):
                entries.append(line.strip())
    return entries


class TestConf:
    def test_root_document_exists(self):
        conf = conf_values()
        root = conf.get("root_doc", conf.get("master_doc", "index"))
        assert find_source(root) is not None

    @pytest.mark.parametrize("key", ["html_static_path", "templates_path", "html_extra_path"])
    def test_referenced_folders_exist(self, key):
        for folder in conf_values().get(key, []):
            assert (DOCS / folder).is_dir(), f"{key} names missing folder {folder}"

    def test_autoapi_dirs_hold_the_package(self):
        dirs = conf_values()["autoapi_dirs"]
        assert dirs
        for d in dirs:
            assert (DOCS / d / "__init__.py").is_file()

    def test_project_name(self):
        assert conf_values()["project"] == "subbandsuite"


class TestPages:
    def test_toctree_entries_resolve(self):
        entries = toctree_entries(find_source("index"))
        assert entries
        for entry in entries:
            assert find_source(entry) is not None, f"toctree entry {entry} has no page"

    def test_nonparabolic_asymmetry_documented(self):
        text = find_source("dispersion").read_text()
        assert re.search(r"not\*\* inverses", text)
        assert "Subband.k" in text
