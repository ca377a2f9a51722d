import csv
import json

import numpy as np
from PIL import Image, ImageDraw

from kscopewf.cli import generate as gen_cli
from kscopewf.cli import cycle as cycle_cli
from kscopewf.cli import audit as audit_cli


def make_source(path, size=48):
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.ellipse((4, 4, 24, 24), fill=(0, 0, 0, 255))
    draw.rectangle((26, 20, 44, 40), fill=(0, 0, 0, 255))
    img.save(path)
    return path


def test_generate_writes_png_and_meta(tmp_path):
    src = make_source(tmp_path / "shapes.png")
    out = tmp_path / "out" / "a.png"
    meta = tmp_path / "out" / "a.json"
    rc = gen_cli.main([str(src), "--out", str(out), "--seed", "3", "--device", "cpu",
                       "--fg", "#57c867", "--meta", str(meta)])
    assert rc == 0
    img = Image.open(out)
    assert img.size == (48, 48) and img.mode == "RGBA"
    info = json.loads(meta.read_text(encoding="utf-8"))
    assert info["foreground"] == "#ff57c867"
    assert set(info["wedge"]) == {"start", "end", "center", "tilt_angle"}
    assert info["run"]["seed"] == 3
    assert "cuda_available" in info["run"]["gpu"]


def test_generate_is_reproducible_with_seed(tmp_path):
    src = make_source(tmp_path / "shapes.png")
    a, b = tmp_path / "a.png", tmp_path / "b.png"
    for p in (a, b):
        assert gen_cli.main([str(src), "--out", str(p), "--seed", "11", "--device", "cpu"]) == 0
    assert np.array_equal(np.asarray(Image.open(a)), np.asarray(Image.open(b)))


def test_generate_uses_outputs_env(tmp_path, monkeypatch):
    src = make_source(tmp_path / "shapes.png")
    monkeypatch.setenv("KSCOPE_OUTPUTS_DIR", str(tmp_path / "env_out"))
    assert gen_cli.main([str(src), "--device", "cpu", "--seed", "1"]) == 0
    assert (tmp_path / "env_out" / "shapes_identicon.png").exists()


def test_generate_error_codes(tmp_path, monkeypatch):
    monkeypatch.delenv("KSCOPE_OUTPUTS_DIR", raising=False)
    src = make_source(tmp_path / "shapes.png")
    assert gen_cli.main([str(src), "--out", str(tmp_path / "x.png"), "--fg", "nope"]) == 2
    assert gen_cli.main([str(src), "--out", str(tmp_path / "x.png"), "--supersample", "0"]) == 2
    assert gen_cli.main([str(src)]) == 2
    wide = tmp_path / "wide.png"
    Image.new("RGBA", (30, 20)).save(wide)
    assert gen_cli.main([str(wide), "--out", str(tmp_path / "w.png"), "--device", "cpu"]) == 2
    assert gen_cli.main([str(src), "--out", str(tmp_path / "w.png"), "--device", "cpu", "--size", "0"]) == 2
    assert gen_cli.main([str(tmp_path / "missing.png"), "--out", str(tmp_path / "m.png")]) == 2
    assert not (tmp_path / "w.png").exists()
    assert gen_cli.main([str(wide), "--out", str(tmp_path / "w.png"), "--device", "cpu", "--crop"]) == 0
    assert Image.open(tmp_path / "w.png").size == (20, 20)


def test_cycle_palette_montage_gif(tmp_path):
    src = make_source(tmp_path / "shapes.png")
    out = tmp_path / "cycle"
    rc = cycle_cli.main([str(src), "--out", str(out), "--count", "3", "--seed", "5", "--device", "cpu",
                         "--palette", "#f14242", "#5379e5", "--montage", "--gif", "--cols", "2"])
    assert rc == 0
    manifest = json.loads((out / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["count"] == 3 and manifest["errors"] == 0
    assert [it["foreground"] for it in manifest["items"]] == ["#fff14242", "#ff5379e5", "#fff14242"]
    for it in manifest["items"]:
        assert (out / it["file"]).exists()
    assert Image.open(out / "montage.png").size == (96, 96)
    gif = Image.open(out / "cycle.gif")
    assert getattr(gif, "n_frames", 1) >= 2
    log_lines = (out / "cycle.log").read_text(encoding="utf-8").splitlines()
    assert len(log_lines) == 3 and all("OK" in l for l in log_lines)


def test_cycle_default_count_and_resume(tmp_path):
    src = make_source(tmp_path / "shapes.png")
    out = tmp_path / "cycle"
    assert cycle_cli.main([str(src), "--out", str(out), "--seed", "2", "--device", "cpu"]) == 0
    first = json.loads((out / "manifest.json").read_text(encoding="utf-8"))
    assert first["count"] == 5
    assert cycle_cli.main([str(src), "--out", str(out), "--seed", "2", "--device", "cpu", "--resume"]) == 0
    second = json.loads((out / "manifest.json").read_text(encoding="utf-8"))
    assert all(it.get("skipped") for it in second["items"])


def test_cycle_frames_depend_on_seed_not_order(tmp_path):
    src = make_source(tmp_path / "shapes.png")
    a, b = tmp_path / "a", tmp_path / "b"
    cycle_cli.main([str(src), "--out", str(a), "--count", "2", "--seed", "8", "--device", "cpu"])
    cycle_cli.main([str(src), "--out", str(b), "--count", "4", "--seed", "8", "--device", "cpu"])
    ma = json.loads((a / "manifest.json").read_text(encoding="utf-8"))["items"]
    mb = json.loads((b / "manifest.json").read_text(encoding="utf-8"))["items"]
    assert [it["start"] for it in ma] == [it["start"] for it in mb[:2]]


def test_cycle_bad_input(tmp_path):
    src = make_source(tmp_path / "shapes.png")
    assert cycle_cli.main([str(src), "--out", str(tmp_path / "o"), "--count", "0"]) == 2
    assert cycle_cli.main([str(src), "--out", str(tmp_path / "o"), "--palette", "#xyz"]) == 2
    assert cycle_cli.main([str(tmp_path / "missing.png"), "--out", str(tmp_path / "o")]) == 2


def test_audit_reports_symmetry(tmp_path):
    src = make_source(tmp_path / "shapes.png", size=64)
    icons = tmp_path / "icons"
    for s in (1, 2):
        assert gen_cli.main([str(src), "--out", str(icons / f"i{s}.png"), "--seed", str(s), "--device", "cpu"]) == 0
    art = tmp_path / "art"
    assert audit_cli.main([str(icons), "--out", str(art)]) == 0
    report = json.loads((art / "audit.json").read_text(encoding="utf-8"))
    assert report["threshold"] == 0.25 and len(report["images"]) == 2
    for row in report["images"]:
        assert row["rot90_mae"] < 0.02
        assert row["mirror_mae"] < 0.03
    with open(art / "audit.csv", newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 2 and list(rows[0]) == audit_cli.FIELDS


def test_audit_failures(tmp_path, monkeypatch):
    monkeypatch.delenv("KSCOPE_ARTIFACTS_DIR", raising=False)
    wide = tmp_path / "imgs" / "wide.png"
    wide.parent.mkdir()
    Image.new("RGBA", (30, 20)).save(wide)
    assert audit_cli.main([str(wide)]) == 2
    assert audit_cli.main([str(tmp_path / "empty_dir_missing"), "--out", str(tmp_path / "a")]) == 1
    assert audit_cli.main([str(wide), "--out", str(tmp_path / "a")]) == 1
    assert (tmp_path / "a" / "audit.json").exists()


def test_cycle_resume_renders_unreadable_frame_again(tmp_path):
    src = make_source(tmp_path / "shapes.png")
    out = tmp_path / "cycle"
    args = [str(src), "--out", str(out), "--count", "2", "--seed", "1", "--device", "cpu"]
    assert cycle_cli.main(args) == 0
    items = json.loads((out / "manifest.json").read_text(encoding="utf-8"))["items"]
    broken = out / items[0]["file"]
    good = np.asarray(Image.open(broken))
    broken.write_bytes(b"garbage")
    (out / "manifest.json").unlink()

    assert cycle_cli.main(args + ["--resume", "--montage"]) == 0
    manifest = json.loads((out / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["errors"] == 0
    assert "skipped" not in manifest["items"][0]
    assert manifest["items"][1]["skipped"] is True
    # same seed and index: the frame comes back identical
    assert np.array_equal(np.asarray(Image.open(broken)), good)
    assert Image.open(out / "montage.png").size == (96, 48)
    assert any(l.endswith("REDO " + items[0]["file"])
               for l in (out / "cycle.log").read_text(encoding="utf-8").splitlines())
