import sys

import pytest

from axil_periph.cli import main

def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["axil-periph", *args])
    main()

def test_generate_rtlil(monkeypatch, tmp_path):
    out = tmp_path / "out.il"
    run_cli(monkeypatch, "generate", "-t", "il", str(out))

    text = out.read_text()
    assert len(text) > 0
    assert "module \\axil_periph" in text

def test_generate_with_options(monkeypatch, tmp_path):
    out = tmp_path / "out.il"
    run_cli(monkeypatch, "--base-addr", "0x40000000", "--num-leds", "8",
            "--led-dimming", "--led-duty", "64",
            "generate", "-t", "il", str(out))

    text = out.read_text()
    assert "module \\axil_periph" in text
    leds = [ l for l in text.splitlines() if l.strip().startswith("wire") and l.endswith("\\leds") ]
    assert leds
    assert all("width 8 output" in l for l in leds)

def test_bad_base_address(monkeypatch, tmp_path):
    with pytest.raises(ValueError):
        run_cli(monkeypatch, "--base-addr", "0x40000004",
                "generate", "-t", "il", str(tmp_path / "out.il"))

def test_simulate(monkeypatch, tmp_path):
    vcd = tmp_path / "out.vcd"
    run_cli(monkeypatch, "simulate", "-c", "50", "-v", str(vcd))

    text = vcd.read_text()
    assert "$enddefinitions" in text
