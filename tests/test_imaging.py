import numpy as np
import pytest
from PIL import Image

from mandelraster.imaging import write_image


def test_write_image_is_grayscale_png(tmp_path):
    bounds = (5, 3)
    pixels = np.arange(15, dtype=np.uint8) * 10

    path = write_image(tmp_path / "nested" / "out.png", pixels, bounds)

    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.mode == "L"
        assert img.size == bounds
        np.testing.assert_array_equal(np.asarray(img), pixels.reshape(3, 5))


def test_write_image_rejects_size_mismatch(tmp_path):
    with pytest.raises(ValueError):
        write_image(tmp_path / "out.png", np.zeros(10, dtype=np.uint8), (4, 3))
