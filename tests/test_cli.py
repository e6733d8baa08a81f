import json

from typer.testing import CliRunner

from dealscope_cli import app
from fixtures.properties import office_basic

runner = CliRunner()


def test_packages_lists_catalog():
    result = runner.invoke(app, ["packages", "retail"])
    assert result.exit_code == 0, result.output
    assert "retail-basic" in result.stdout
    assert "retail-lease-durability" in result.stdout


def test_fields_for_package():
    result = runner.invoke(app, ["fields", "office-basic"])
    assert result.exit_code == 0, result.output
    assert "purchasePrice" in result.stdout
    assert "Current NOI" in result.stdout


def test_fields_unknown_package_exits_nonzero():
    result = runner.invoke(app, ["fields", "no-such-package"])
    assert result.exit_code == 1


def test_analyze_json_file(tmp_path):
    path = tmp_path / "deal.json"
    path.write_text(json.dumps(office_basic()), encoding="utf-8")

    result = runner.invoke(app, ["analyze", str(path), "--package", "office-basic"])
    assert result.exit_code == 0, result.output
    assert '"capRate": "8.00%"' in result.stdout
    assert '"overall": "Excellent"' in result.stdout


def test_screen_csv(tmp_path):
    csv_path = tmp_path / "portfolio.csv"
    csv_path.write_text(
        "name,purchasePrice,currentNOI\n"
        "Tower A,1000000,90000\n"
        "Strip B,2000000,60000\n",
        encoding="utf-8",
    )
    out_path = tmp_path / "out" / "screened.csv"

    result = runner.invoke(
        app,
        ["screen", str(csv_path), "--metric", "capRate", "--id-column", "name", "--output", str(out_path)],
    )
    assert result.exit_code == 0, result.output
    assert '"n_properties": 2' in result.stdout
    assert out_path.exists()


def test_screen_requires_metric_selection(tmp_path):
    csv_path = tmp_path / "portfolio.csv"
    csv_path.write_text("purchasePrice,currentNOI\n1000000,90000\n", encoding="utf-8")
    result = runner.invoke(app, ["screen", str(csv_path)])
    assert result.exit_code != 0


def test_screen_unknown_id_column_exits_2(tmp_path):
    csv_path = tmp_path / "portfolio.csv"
    csv_path.write_text("purchasePrice,currentNOI\n1000000,90000\n", encoding="utf-8")
    result = runner.invoke(app, ["screen", str(csv_path), "--metric", "capRate", "--id-column", "ref"])
    assert result.exit_code == 2
