import json

import pytest

from src import main as cli

pytestmark = pytest.mark.anyio


def write_json(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


async def test_html_only(media_dir, tmp_path):
    raw = write_json(tmp_path / "raw.json", {"data": {"results": [{"name": "Acme", "amount": 10}]}})
    business = write_json(tmp_path / "business.json", {"isCompany": "ORGANISATION", "Name": "Acme Pty Ltd"})
    out = tmp_path / "report.html"

    code = await cli.main([
        "--type", "unclaimed-money", "--input", raw, "--business", business, "--html-only", str(out),
    ])

    assert code == 0
    html = out.read_text(encoding="utf-8")
    assert "$10.00" in html
    assert "${" not in html


async def test_unknown_type_exits_with_error(media_dir, tmp_path):
    raw = write_json(tmp_path / "raw.json", {})
    code = await cli.main(["--type", "nope", "--input", raw, "--html-only", str(tmp_path / "x.html")])
    assert code == 1
    assert not (tmp_path / "x.html").exists()


async def test_full_run(media_dir, tmp_path, monkeypatch, capsys):
    calls = {}

    async def fake_init_db():
        calls["init_db"] = True

    async def fake_persist(raw_response, **kwargs):
        calls["persist"] = (raw_response, kwargs)
        return "acme.pdf"

    monkeypatch.setattr(cli, "init_db", fake_init_db)
    monkeypatch.setattr(cli, "persist", fake_persist)
    monkeypatch.setattr(cli, "setup_render_logging", lambda: None)

    raw = write_json(tmp_path / "raw.json", {"data": {}})
    code = await cli.main(["--type", "ato", "--input", raw, "--name", "acme", "--user-id", "3"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "acme.pdf"
    assert calls["init_db"]
    assert calls["persist"][1]["report_type"] == "ato"
    assert calls["persist"][1]["report_name"] == "acme"
    assert calls["persist"][1]["user_id"] == 3
