from ezxtree.cli import main


def test_prints_document(tmp_path, capsys):
    path = tmp_path / "doc.xml"
    path.write_text("<a>hi</a>", encoding="utf-8")
    assert main([str(path)]) == 0
    captured = capsys.readouterr()
    assert captured.out == "<a>hi</a>\n"
    assert captured.err == ""


def test_usage_on_wrong_argument_count(capsys):
    assert main([]) != 0
    assert "usage" in capsys.readouterr().err


def test_parse_error_reported(tmp_path, capsys):
    path = tmp_path / "bad.xml"
    path.write_text("<a>", encoding="utf-8")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "unclosed tag <a>" in captured.err
    assert captured.out == "<a></a>\n"


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.xml")]) == 1
    assert "absent.xml" in capsys.readouterr().err