"""Photo EXIF helpers used to prefill coordinates."""
import pytest
from PIL import Image
from PIL.TiffImagePlugin import IFDRational

from app.services.exif.reader import dms_to_deg, parse_exif, read_gps

pytestmark = pytest.mark.unit


def test_dms_from_rationals():
    values = (IFDRational(48, 1), IFDRational(51, 1), IFDRational(2376, 100))

    assert dms_to_deg(values, "N") == pytest.approx(48.8566, abs=1e-4)


def test_dms_from_pairs_and_west_ref():
    assert dms_to_deg(((2, 1), (21, 1), (756, 100)), "W") == pytest.approx(-2.3521, abs=1e-4)


@pytest.mark.parametrize("values", [None, (), ((1, 0), (0, 1), (0, 1))])
def test_dms_incomplete(values):
    assert dms_to_deg(values, "N") is None


def test_photo_without_exif(tmp_path):
    path = tmp_path / "plain.jpg"
    Image.new("RGB", (8, 8), "white").save(path, "JPEG")

    assert read_gps(str(path)) is None
    info = parse_exif(str(path))
    assert info["gps_point"] is None
    assert info["taken_at"] is None


def test_unreadable_file_has_no_gps(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not a photo")

    assert read_gps(str(path)) is None
