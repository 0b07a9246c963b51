"""
Tests for BuildConfig and RewriteRule.
"""
import json
from pathlib import Path

import pytest

from default_config import DEFAULT_CONFIG
from models import (
    Artifact,
    BuildConfig,
    BuildReport,
    RewriteRule,
    DELETE_PATTERN,
    INSERT_BEFORE,
    REPLACE,
)


# ─────────────────────────────────────────────────────────────────────────────
# BuildConfig
# ─────────────────────────────────────────────────────────────────────────────

def test_defaults_match_default_config():
    config = BuildConfig()
    assert config.to_dict() == DEFAULT_CONFIG


def test_default_instances_do_not_share_lists():
    a, b = BuildConfig(), BuildConfig()
    a.copy_dirs.append("images")
    assert b.copy_dirs == ["assets", "vendors"]


def test_output_path_relative_to_root(tmp_path):
    config = BuildConfig(root=str(tmp_path))
    assert config.output_path == tmp_path / "dist"


def test_output_path_absolute_is_kept(tmp_path):
    out = tmp_path / "elsewhere"
    config = BuildConfig(root="site", output_dir=str(out))
    assert config.output_path == out


def test_load_missing_file_gives_defaults(tmp_path):
    config = BuildConfig.load(str(tmp_path / "nope.json"))
    assert config == BuildConfig()


def test_load_partial_overrides(tmp_path):
    path = tmp_path / "sitebuild.json"
    path.write_text(json.dumps({"output_dir": "public", "framework_version": "18.3.1"}))

    config = BuildConfig.load(str(path))

    assert config.output_dir == "public"
    assert config.framework_version == "18.3.1"
    assert config.script_output == "bundle.min.js"


def test_save_then_load(tmp_path):
    path = tmp_path / "config.json"
    config = BuildConfig(output_dir="build", font_file="inter.woff2")
    config.save(str(path))
    assert BuildConfig.load(str(path)) == config


def test_unknown_keys_rejected():
    with pytest.raises(ValueError, match="outdir"):
        BuildConfig.from_dict({"outdir": "dist"})


# ─────────────────────────────────────────────────────────────────────────────
# RewriteRule
# ─────────────────────────────────────────────────────────────────────────────

def test_replace_first_occurrence_only():
    rule = RewriteRule("r", REPLACE, "a", "b")
    assert rule.apply("a a a") == "b a a"


def test_insert_before_anchor():
    rule = RewriteRule("r", INSERT_BEFORE, "</body>", "<hr>")
    assert rule.apply("<body></body></body>") == "<body><hr></body></body>"


def test_delete_pattern_non_greedy():
    rule = RewriteRule("r", DELETE_PATTERN, r"<b>[\s\S]*?</b>")
    assert rule.apply("<b>1</b><b>2</b>") == "<b>2</b>"


def test_pattern_replacement_taken_literally():
    rule = RewriteRule("r", DELETE_PATTERN, r"(x)", r"\1\n")
    assert rule.apply("axb") == "a\\1\\nb"


def test_matches():
    assert RewriteRule("r", REPLACE, "</title>").matches("<title></title>")
    assert not RewriteRule("r", REPLACE, "</TITLE>").matches("<title></title>")
    assert RewriteRule("r", DELETE_PATTERN, r"<i>.*?</i>").matches("<i>x</i>")


def test_unknown_kind_raises():
    with pytest.raises(ValueError):
        RewriteRule("r", "append", "x").apply("x")


# ─────────────────────────────────────────────────────────────────────────────
# BuildReport
# ─────────────────────────────────────────────────────────────────────────────

def test_report_total_size():
    report = BuildReport(
        output_dir="dist",
        artifacts=[Artifact("index.html", 100), Artifact("bundle.min.js", 2048)],
    )
    assert report.total_size == 2148
    assert report.to_dict()["total_size"] == 2148
    assert report.to_dict()["artifacts"][0] == {"path": "index.html", "size": 100}
