import io

from xv6kit.listing import DIRSIZ, FileType, describe, dir_table, fmtname, ls, type_name


def test_fmtname_pads_short_names():
    name = fmtname("a/b/hello")
    assert len(name) == DIRSIZ
    assert name.rstrip() == "hello"


def test_fmtname_leaves_long_names():
    long_name = "a" * 20
    assert fmtname("x/" + long_name) == long_name


def test_type_names():
    assert type_name(FileType.DIR) == "Directory "
    assert type_name(FileType.FILE) == "File      "
    assert type_name(FileType.DEVICE) == "Device    "
    assert type_name(99) == "Unknown   "


def test_ls_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    content = "hello"
    (tmp_path / "f.txt").write_text(content)
    out = io.StringIO()
    ls("f.txt", out)
    fields = out.getvalue().split()
    assert fields[0] == "f.txt"
    assert int(fields[1]) == FileType.FILE
    assert int(fields[3]) == len(content)


def test_ls_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.txt").write_text("abc")
    (tmp_path / "sub").mkdir()
    out = io.StringIO()
    ls(".", out)
    rows = {line.split()[0]: line.split() for line in out.getvalue().splitlines()}
    assert set(rows) == {".", "..", "a.txt", "sub"}
    assert int(rows["sub"][1]) == FileType.DIR
    assert int(rows["a.txt"][1]) == FileType.FILE


def test_ls_path_too_long(tmp_path):
    path = str(tmp_path) + "/." * 300
    out = io.StringIO()
    ls(path, out)
    assert out.getvalue() == "ls: path too long\n"


def test_ls_missing(tmp_path, capsys):
    missing = str(tmp_path / "missing")
    ls(missing, io.StringIO())
    assert capsys.readouterr().err == f"ls: cannot open {missing}\n"


def test_dir_table(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    content = "twelve bytes"
    (tmp_path / "f").write_text(content)
    out = io.StringIO()
    dir_table(".", out)
    lines = out.getvalue().splitlines()
    rule = "-" * 58
    assert lines[0] == rule and lines[2] == rule and lines[-1] == rule
    assert lines[1].startswith("| .")
    assert len(lines[1]) == len(rule)
    rows = {}
    for line in lines[3:-1]:
        ino, kind, size, name = (part.strip() for part in line.strip("|").split("|"))
        rows[name] = (kind, size)
    assert set(rows) == {".", "..", "f"}
    assert rows["f"] == ("File", str(len(content)))
    assert rows["."][0] == "Directory"


def test_describe(tmp_path):
    f = tmp_path / "f"
    content = "data!"
    f.write_text(content)
    out = io.StringIO()
    assert describe(str(f), out) == 0
    fields = dict(line.split(":", 1) for line in out.getvalue().splitlines())
    assert fields["Type"].strip() == "File"
    assert int(fields["Size"]) == len(content)
    assert int(fields["Number of Links"]) == 1


def test_describe_missing(tmp_path):
    missing = str(tmp_path / "missing")
    out = io.StringIO()
    assert describe(missing, out) == -1
    assert out.getvalue() == f"lstat: cannot stat {missing}\n"