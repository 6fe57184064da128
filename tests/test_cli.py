import cli


def write_input(tmp_path, text):
    source = tmp_path / "script.txt"
    source.write_text(text, encoding="utf-8")
    return source


def test_compress_then_decompress(tmp_path, capsys):
    source = write_input(tmp_path, "The year 2024, in short.\nDone.\n")
    payload = tmp_path / "encoded.bin"
    tree = tmp_path / "tree.txt"
    result = tmp_path / "result.txt"

    assert cli.main(["compress", str(source), "--payload", str(payload), "--tree", str(tree)]) == 0
    out = capsys.readouterr().out
    assert "File read successfully." in out
    assert "Compression completed." in out

    assert cli.main(["decompress", "--payload", str(payload), "--tree", str(tree),
                     "--output", str(result)]) == 0
    assert "Decompression completed." in capsys.readouterr().out
    assert result.read_bytes() == b"the year 2024, in short.\ndone.\n"


def test_raw_format_round_trip_through_files(tmp_path):
    source = write_input(tmp_path, "ab ab\n")
    payload = tmp_path / "encoded.bin"
    tree = tmp_path / "tree.txt"
    result = tmp_path / "result.txt"
    common = ["--payload", str(payload), "--tree", str(tree), "--payload-format", "raw"]

    assert cli.main(["--quiet", "compress", str(source)] + common) == 0
    assert payload.read_bytes() == bytes([0b10110110, 0b11000000])
    assert tree.read_text() == "* * NEWLINE # # SPACE # # * a # # b # #\n"

    assert cli.main(["--quiet", "decompress", "--output", str(result)] + common) == 0
    assert result.read_bytes() == b"ab ab\n\n\n"


def test_quiet_suppresses_status(tmp_path, capsys):
    source = write_input(tmp_path, "abc")
    args = ["--quiet", "compress", str(source),
            "--payload", str(tmp_path / "p.bin"), "--tree", str(tmp_path / "t.txt")]
    assert cli.main(args) == 0
    assert capsys.readouterr().out == ""


def test_verbose_prints_code_table(tmp_path, capsys):
    source = write_input(tmp_path, "ab ab\n")
    args = ["compress", str(source), "--verbose",
            "--payload", str(tmp_path / "p.bin"), "--tree", str(tmp_path / "t.txt")]
    assert cli.main(args) == 0
    out = capsys.readouterr().out
    assert "NEWLINE  00" in out
    assert "SPACE    01" in out


def test_prompts_for_missing_input(tmp_path, monkeypatch):
    source = write_input(tmp_path, "aaaa")
    monkeypatch.setattr("builtins.input", lambda prompt: str(source))
    payload = tmp_path / "p.bin"
    assert cli.main(["--quiet", "compress", "--payload", str(payload),
                     "--tree", str(tmp_path / "t.txt")]) == 0
    assert payload.read_bytes() == b"\x00\x00\x00\x04\x00"


def test_empty_input_is_an_error(tmp_path, capsys):
    source = write_input(tmp_path, "!!!")
    payload = tmp_path / "p.bin"
    code = cli.main(["compress", str(source), "--payload", str(payload),
                     "--tree", str(tmp_path / "t.txt")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err
    assert not payload.exists()


def test_missing_file_is_an_error(tmp_path, capsys):
    code = cli.main(["compress", str(tmp_path / "nope.txt")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_bad_tree_leaves_no_output(tmp_path, capsys):
    tree = tmp_path / "tree.txt"
    tree.write_text("* a # #")
    payload = tmp_path / "p.bin"
    payload.write_bytes(b"\x00\x00\x00\x01\x00")
    result = tmp_path / "result.txt"
    code = cli.main(["decompress", "--payload", str(payload), "--tree", str(tree),
                     "--output", str(result)])
    assert code == 1
    assert not result.exists()


def test_show_tree(tmp_path, capsys):
    tree = tmp_path / "tree.txt"
    tree.write_text("* SPACE # # 9 # #\n")
    assert cli.main(["--quiet", "show-tree", str(tree)]) == 0
    assert capsys.readouterr().out == "*\n  SPACE\n    #\n    #\n  9\n    #\n    #\n"


def test_tree_write_failure_removes_payload(tmp_path, capsys):
    source = write_input(tmp_path, "abc")
    payload = tmp_path / "p.bin"
    tree_dir = tmp_path / "tree_dir"
    tree_dir.mkdir()
    code = cli.main(["compress", str(source), "--payload", str(payload), "--tree", str(tree_dir)])
    assert code == 1
    assert "Error:" in capsys.readouterr().err
    assert not payload.exists()


def test_closed_stdin_is_an_error(monkeypatch, capsys):
    def no_input(prompt):
        raise EOFError
    monkeypatch.setattr("builtins.input", no_input)
    assert cli.main(["--quiet", "compress"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_carriage_returns_are_dropped(tmp_path):
    source = tmp_path / "script.txt"
    source.write_bytes(b"ab\r\ncd\re\n")
    payload = tmp_path / "p.bin"
    tree = tmp_path / "t.txt"
    result = tmp_path / "result.txt"
    assert cli.main(["--quiet", "compress", str(source), "--payload", str(payload),
                     "--tree", str(tree)]) == 0
    assert cli.main(["--quiet", "decompress", "--payload", str(payload), "--tree", str(tree),
                     "--output", str(result)]) == 0
    assert result.read_bytes() == b"ab\ncde\n"
