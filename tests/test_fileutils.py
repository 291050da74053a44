import pytest

from subdomainx.fileutils import ensure_directory, file_exists, read_lines, write_lines


def test_read_lines_skips_comments_and_blanks(tmp_path):
    content = (
        "# This is a comment\n"
        "domain1.com\n"
        "domain2.com\n"
        "\n"
        "domain3.com\n"
        "# Another comment\n"
        "domain4.com"
    )
    path = tmp_path / "test_domains"
    path.write_text(content)
    assert read_lines(path) == ["domain1.com", "domain2.com", "domain3.com", "domain4.com"]


def test_read_lines_strips_whitespace(tmp_path):
    path = tmp_path / "spaced.txt"
    path.write_text("  example.com  \r\n\t test.org\n")
    assert read_lines(path) == ["example.com", "test.org"]


def test_read_lines_empty_file(tmp_path):
    path = tmp_path / "test_empty"
    path.write_text("")
    assert read_lines(path) == []


def test_read_lines_non_existent_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_lines(tmp_path / "non_existent_file.txt")


def test_write_lines_creates_parent_directories(tmp_path):
    lines = ["line1", "line2", "line3"]
    output = tmp_path / "subdir" / "test_output.txt"
    write_lines(output, lines)
    assert read_lines(output) == lines
    assert output.read_text() == "line1\nline2\nline3\n"


def test_write_lines_empty(tmp_path):
    output = tmp_path / "empty_output.txt"
    write_lines(output, [])
    assert file_exists(output)
    assert output.read_text() == ""


def test_write_lines_in_current_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_lines("test_file.txt", ["line1", "line2", "line3"])
    assert read_lines("test_file.txt") == ["line1", "line2", "line3"]


def test_file_exists(tmp_path):
    path = tmp_path / "test_exists"
    path.write_text("x")
    assert file_exists(path) is True
    assert file_exists(tmp_path / "non_existent_file.txt") is False


def test_ensure_directory(tmp_path):
    new_dir = tmp_path / "subdir1" / "subdir2"
    ensure_directory(new_dir)
    assert new_dir.is_dir()
    ensure_directory(new_dir)
    assert file_exists(new_dir)


def test_ensure_directory_over_file_fails(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(OSError):
        ensure_directory(blocker)