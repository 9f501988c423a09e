from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from lyric2pro.cli import _default_filename, _slugify, main
from lyric2pro.exceptions import ApiError

SONG = """\
title Cuan grande es Él
artist Tradicional
key G
Estrofa:
G          C
Señor mi Dios
"""

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_client(saved=None) -> MagicMock:
    client = MagicMock()
    client.__enter__.return_value = client
    client.create_song_chordpro.return_value = saved or {"_id": "abc123"}
    client.update_song_chordpro.return_value = saved or {"_id": "abc123"}
    return client


# ---------------------------------------------------------------------------
# _slugify / _default_filename
# ---------------------------------------------------------------------------


def test_slugify_basic():
    assert _slugify("Sublime Gracia") == "sublime-gracia"


def test_slugify_apostrophe():
    assert _slugify("Nature's Song") == "natures-song"


def test_slugify_keeps_accented_letters():
    assert _slugify("Cuan grande es Él") == "cuan-grande-es-él"


def test_default_filename():
    assert _default_filename("Tradicional", "Santo") == "tradicional-santo.cho"


def test_default_filename_without_metadata():
    assert _default_filename("", "") == "song.cho"
    assert _default_filename("", "Santo") == "santo.cho"


# ---------------------------------------------------------------------------
# --help
# ---------------------------------------------------------------------------


def test_help_output():
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "convert" in result.output
    assert "validate" in result.output
    assert "upload" in result.output


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------


def test_convert_stdout():
    result = CliRunner().invoke(main, ["convert", "--stdout", "-"], input=SONG)
    assert result.exit_code == 0
    assert "{title: Cuan grande es Él}" in result.output
    assert "[G]Señor mi Di[C]os" in result.output


def test_convert_writes_default_file(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(main, ["convert", "-"], input=SONG)
        assert result.exit_code == 0
        assert "tradicional-cuan-grande-es-él.cho" in result.output


def test_convert_output_flag(tmp_path):
    src = tmp_path / "song.txt"
    src.write_text(SONG, encoding="utf-8")
    out_file = tmp_path / "song.cho"
    result = CliRunner().invoke(main, ["convert", "-o", str(out_file), str(src)])
    assert result.exit_code == 0
    assert out_file.read_text(encoding="utf-8").startswith("{title: Cuan grande es Él}")
    assert out_file.read_text(encoding="utf-8").endswith("\n")


def test_convert_detector_option():
    text = "title t\nartist a\nverse:\nC   G   Am\nHola mundo"
    result = CliRunner().invoke(
        main, ["convert", "--stdout", "--detector", "anchored", "-"], input=text
    )
    assert result.exit_code == 0
    assert result.output.rstrip().endswith("{verse}\nHola mundo")


def test_convert_unknown_detector_rejected():
    result = CliRunner().invoke(
        main, ["convert", "--stdout", "--detector", "magic", "-"], input=SONG
    )
    assert result.exit_code != 0


def test_convert_reports_validation_errors_but_converts():
    result = CliRunner().invoke(main, ["convert", "--stdout", "-"], input="verse:\nla la")
    assert result.exit_code == 0
    assert "no title found" in result.output
    assert "{verse}\nla la" in result.output


def test_convert_strict_refuses_invalid_text():
    result = CliRunner().invoke(
        main, ["convert", "--stdout", "--strict", "-"], input="verse:\nla la"
    )
    assert result.exit_code == 1
    assert "{verse}" not in result.output


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


def test_validate_ok():
    result = CliRunner().invoke(main, ["validate", "-"], input=SONG)
    assert result.exit_code == 0
    assert "OK" in result.output


def test_validate_errors_exit_nonzero():
    result = CliRunner().invoke(main, ["validate", "-"], input="key G")
    assert result.exit_code == 1
    assert "no title found" in result.output
    assert "no artist found" in result.output
    assert "no content found" in result.output


# ---------------------------------------------------------------------------
# upload
# ---------------------------------------------------------------------------


def test_upload_creates_song():
    client = _mock_client()
    with patch("lyric2pro.cli.ApiClient", return_value=client) as factory:
        result = CliRunner().invoke(
            main,
            ["upload", "--api-url", "https://api.test", "--token", "t", "-"],
            input=SONG,
        )
    assert result.exit_code == 0
    assert "Saved song abc123" in result.output
    factory.assert_called_once_with("https://api.test", token="t")
    sent = client.create_song_chordpro.call_args.args[0]
    assert sent.startswith("{title: Cuan grande es Él}")


def test_upload_updates_song_with_id():
    client = _mock_client()
    with patch("lyric2pro.cli.ApiClient", return_value=client):
        result = CliRunner().invoke(
            main,
            ["upload", "--api-url", "https://api.test", "--song-id", "abc123", "-"],
            input=SONG,
        )
    assert result.exit_code == 0
    assert client.update_song_chordpro.call_args.args[0] == "abc123"
    client.create_song_chordpro.assert_not_called()


def test_upload_reads_api_url_from_env():
    client = _mock_client()
    with patch("lyric2pro.cli.ApiClient", return_value=client) as factory:
        result = CliRunner().invoke(
            main,
            ["upload", "-"],
            input=SONG,
            env={"LYRIC2PRO_API_URL": "https://env.test", "LYRIC2PRO_TOKEN": "envtoken"},
        )
    assert result.exit_code == 0
    factory.assert_called_once_with("https://env.test", token="envtoken")


def test_upload_requires_api_url():
    result = CliRunner().invoke(main, ["upload", "-"], input=SONG, env={"LYRIC2PRO_API_URL": None})
    assert result.exit_code != 0


def test_upload_refuses_invalid_text():
    with patch("lyric2pro.cli.ApiClient") as factory:
        result = CliRunner().invoke(
            main, ["upload", "--api-url", "https://api.test", "-"], input="verse:\nla la"
        )
    assert result.exit_code == 1
    factory.assert_not_called()


def test_upload_api_error_exits_nonzero():
    client = _mock_client()
    client.create_song_chordpro.side_effect = ApiError("https://api.test/api/songs/chordpro", 401)
    with patch("lyric2pro.cli.ApiClient", return_value=client):
        result = CliRunner().invoke(
            main, ["upload", "--api-url", "https://api.test", "-"], input=SONG
        )
    assert result.exit_code == 1
    assert "HTTP 401" in result.output
    assert "--token" in result.output
