import json

import plotly.graph_objects as go
import pytest

from metabo_manhattan.exceptions import InvalidSelectionSize, UnknownTraitName
from metabo_manhattan.pipeline.ranking import select_top_traits
from metabo_manhattan.pipeline.reshape import to_long
from metabo_manhattan.plot_types import RenderMode
from metabo_manhattan.plotting.batch import artifact_filename, render_all, write_manifest


def test_separate_mode_one_artifact_per_trait_in_order(two_chrom_wide, two_chrom_layout):
    selection = select_top_traits(to_long(two_chrom_wide), 3)

    artifacts = render_all(two_chrom_wide, two_chrom_layout, selection, mode="separate")

    assert [a.name for a in artifacts] == list(selection.traits)
    assert [a.figure.layout.title.text for a in artifacts] == list(selection.traits)
    assert all(a.path is None for a in artifacts)


def test_faceted_mode_single_artifact(two_chrom_wide, two_chrom_layout):
    artifacts = render_all(
        two_chrom_wide, two_chrom_layout, ["M101", "M303"], mode=RenderMode.FACETED, facet_rows=2
    )

    assert len(artifacts) == 1
    assert artifacts[0].traits == ("M101", "M303")
    assert [a.text for a in artifacts[0].figure.layout.annotations][:2] == ["M101", "M303"]


def test_unknown_trait_aborts_before_writing(tmp_path, two_chrom_wide, two_chrom_layout):
    out = tmp_path / "figs"

    with pytest.raises(UnknownTraitName):
        render_all(
            two_chrom_wide, two_chrom_layout, ["M101", "missing"],
            output_dir=out, export_format="html",
        )
    assert not out.exists()


def test_empty_trait_list(two_chrom_wide, two_chrom_layout):
    with pytest.raises(InvalidSelectionSize):
        render_all(two_chrom_wide, two_chrom_layout, [])


def test_invalid_mode(two_chrom_wide, two_chrom_layout):
    with pytest.raises(ValueError):
        render_all(two_chrom_wide, two_chrom_layout, ["M101"], mode="grid")


def test_export_and_report(tmp_path, two_chrom_wide, two_chrom_layout):
    artifacts = render_all(
        two_chrom_wide, two_chrom_layout, ["M202", "M101"],
        output_dir=tmp_path / "figs", export_format="html",
        report_path=tmp_path / "report.html",
    )

    assert [a.path.name for a in artifacts] == ["001_M202.html", "002_M101.html"]
    assert all(a.path.exists() for a in artifacts)
    assert (tmp_path / "report.html").exists()


def test_manifest(tmp_path, two_chrom_wide, two_chrom_layout):
    artifacts = render_all(
        two_chrom_wide, two_chrom_layout, ["M202"],
        output_dir=tmp_path, export_format="html",
    )

    manifest = write_manifest(artifacts, tmp_path / "manifest.json", metadata={"mode": "separate"})

    on_disk = json.loads((tmp_path / "manifest.json").read_text())
    assert on_disk == manifest
    assert on_disk["metadata"]["mode"] == "separate"
    assert on_disk["artifacts"][0]["traits"] == ["M202"]


def test_artifact_filename_sanitizes():
    assert artifact_filename("LPC 18:1/sn-2", "png", 7) == "007_LPC_18_1_sn-2.png"


def test_export_failure_propagates_without_retry(tmp_path, monkeypatch, two_chrom_wide, two_chrom_layout):
    calls = []

    def failing_write_html(self, *args, **kwargs):
        calls.append(args)
        raise OSError("disk full")

    monkeypatch.setattr(go.Figure, "write_html", failing_write_html)

    with pytest.raises(OSError, match="disk full"):
        render_all(
            two_chrom_wide, two_chrom_layout, ["M202", "M101"],
            output_dir=tmp_path / "figs", export_format="html",
            report_path=tmp_path / "report.html",
        )
    assert len(calls) == 1
    assert not (tmp_path / "report.html").exists()


def test_output_dir_that_is_a_file(tmp_path, two_chrom_wide, two_chrom_layout):
    blocker = tmp_path / "figs"
    blocker.write_text("not a directory")

    with pytest.raises(OSError):
        render_all(
            two_chrom_wide, two_chrom_layout, ["M101"],
            output_dir=blocker, export_format="html",
        )
