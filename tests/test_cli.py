import PIL.Image
import pytest

import mandel


def test_writes_grayscale_png(tmp_path):
    output = tmp_path / "mandel.png"
    mandel.main([str(output), "--size", "40x30", "--upper-left=-2.0,1.0", "--lower-right=1.0,-1.0"])
    with PIL.Image.open(output) as image:
        assert image.size == (40, 30)
        assert image.mode == "L"


def test_writes_rainbow_single_execution(tmp_path):
    output = tmp_path / "rainbow.png"
    mandel.main([str(output), "--size", "20x10", "--color", "rainbow", "--execution", "single"])
    with PIL.Image.open(output) as image:
        assert image.size == (20, 10)
        assert image.mode == "RGB"


def test_missing_suffix_is_added(tmp_path):
    mandel.main([str(tmp_path / "frame"), "--size", "8x8", "--color", "colormap", "--colormap", "inferno"])
    assert (tmp_path / "frame.png").is_file()


def test_default_viewport_and_workers(tmp_path):
    output = tmp_path / "default.png"
    mandel.main([str(output), "--size", "16x12", "--workers", "3", "--max-iterations", "40"])
    assert output.is_file()


@pytest.mark.parametrize(
    "args",
    [
        ["--size", "10by10"],
        ["--size", "0x10"],
        ["--size", "8x8", "--upper-left", "nonsense"],
        ["--size", "8x8", "--upper-left=1.0,1.0", "--lower-right=-1.0,-1.0"],
        ["--size", "8x8", "--max-iterations", "0"],
        ["--size", "8x8", "--workers", "0"],
        ["--size", "8x8", "--execution", "single", "--workers", "4"],
        ["--size", "8x8", "--color", "colormap", "--inside-color", "#12"],
        ["--size", "8x8", "--color", "colormap", "--colormap", "no-such-colormap"],
        ["--size", "8x8", "--format", "jpg"],
        ["--size", "8x8", "--bound-radius", "1e200"],
        ["--size", "8x8", "--bound-radius", "nan"],
        ["--size", "8x8", "--bound-radius", "0"],
        ["--size", "8x8", "--bound-radius", "-2"],
    ],
)
def test_invalid_arguments_exit_before_writing(tmp_path, args):
    output = tmp_path / "bad.png"
    with pytest.raises(SystemExit) as excinfo:
        mandel.main([str(output), *args])
    assert excinfo.value.code == 2
    assert not output.exists()


def test_output_directory_rejected(tmp_path):
    with pytest.raises(SystemExit):
        mandel.main([str(tmp_path), "--size", "8x8"])


def test_verbose_logging(tmp_path, capsys):
    output = tmp_path / "verbose.png"
    mandel.main([str(output), "--size", "8x8", "--verbose"])
    out = capsys.readouterr().out
    assert "rendered" in out
    assert output.name in out
    mandel.VERBOSE = False


def test_workers_help_points_to_tensor_backend(capsys):
    with pytest.raises(SystemExit):
        mandel.main(["--help"])
    out = " ".join(capsys.readouterr().out.split())
    assert "python bands share the GIL" in out
