import os

import pytest

from src.column.mainColumn import build_parser, main, run
from src.utils.Exceptions import MissingInputFile, UnsupportedCrossSection, UnsupportedPackingType


def write_deck(path, ptype="cube", cross_section="circle"):
    values = [cross_section, ptype, "collapse", 0, 1.0, 1e6, 5e5, -0.2, -0.2, 0.4, 0.6, 1e5, 5e4, 5e4, 0.05,
              0.05, 1000, 1e-5, 0.05, 4.0, 4.0, 6.0, 1, 1, 1, 3, 3, 2.65, 1.0]
    path.write_text("\n".join(str(value) for value in values) + "\n")


def test_parser_defaults():
    args = build_parser().parse_args(["column"])
    assert args.filekey == "column"
    assert args.nproc == 1
    args = build_parser().parse_args(["column", "8"])
    assert args.nproc == 8


def test_missing_input_aborts(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(MissingInputFile, match="absent.inp"):
        main(["absent"])
    assert os.listdir(tmp_path) == []


def test_unsupported_packing_aborts_without_output(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_deck(tmp_path / "deck.inp", ptype="tetrahedra")
    with pytest.raises(UnsupportedPackingType):
        run("deck", 1, output=str(tmp_path / "out"))
    assert os.listdir(tmp_path) == ["deck.inp"]


def test_unsupported_cross_section_aborts_without_output(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_deck(tmp_path / "deck.inp", cross_section="hexagon")
    with pytest.raises(UnsupportedCrossSection):
        main(["deck"])
    assert os.listdir(tmp_path) == ["deck.inp"]


def test_thread_number_must_be_positive(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit):
        main(["deck", "0"])
