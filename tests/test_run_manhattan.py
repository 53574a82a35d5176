import json
from pathlib import Path

from metabo_manhattan.run_manhattan import build_parser, main


def test_cli_separate_with_report_and_manifest(tmp_path, gwas_csv):
    out = tmp_path / "figs"
    code = main([
        "--input", str(gwas_csv),
        "--top-n", "2",
        "--format", "html",
        "--output-dir", str(out),
        "--report", str(tmp_path / "report.html"),
        "--manifest", str(tmp_path / "manifest.json"),
        "--labels",
    ])

    assert code == 0
    manifest = json.loads((tmp_path / "manifest.json").read_text())
    assert [a["traits"] for a in manifest["artifacts"]] == [["M202"], ["M101"]]
    assert sorted(p.name for p in out.iterdir()) == ["001_M202.html", "002_M101.html"]


def test_cli_faceted_explicit_traits(tmp_path, gwas_csv):
    code = main([
        "--input", str(gwas_csv),
        "--traits", "M303", "M101",
        "--mode", "faceted",
        "--format", "html",
        "--output-dir", str(tmp_path),
    ])

    assert code == 0
    assert [p.name for p in tmp_path.glob("*.html")] == ["001_faceted_2_traits.html"]


def test_cli_reports_errors(tmp_path, gwas_csv):
    assert main(["--input", str(gwas_csv), "--top-n", "9", "--output-dir", str(tmp_path)]) == 1
    assert main(["--input", str(gwas_csv), "--traits", "nope", "--output-dir", str(tmp_path)]) == 1
    assert main(["--input", str(tmp_path / "missing.csv")]) == 1


def test_output_dir_defaults_under_working_directory():
    args = build_parser().parse_args(["--input", "table.csv"])

    assert not args.output_dir.is_absolute()
    assert args.output_dir == Path("data_processed") / "reports" / "figures"
