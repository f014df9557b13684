import cv2
import numpy as np
import pytest

from grid_nav.common.exceptions import InvalidGridError
from grid_nav.service.map_loader import image_to_occupancy, load_map_yaml


def _write_map(tmp_path, img, extra=""):
    cv2.imwrite(str(tmp_path / "map.png"), img)
    yaml_path = tmp_path / "map.yaml"
    yaml_path.write_text(
        "image: map.png\nresolution: 0.1\norigin: [-1.0, -2.0, 0.0]\n" + extra,
        encoding="utf-8",
    )
    return yaml_path


def test_image_to_occupancy_trinary():
    img = np.array([[0, 205, 254, 100]], dtype=np.uint8)
    assert image_to_occupancy(img).tolist() == [[100, -1, 0, -1]]
    assert image_to_occupancy(img, negate=True).tolist() == [[0, 100, 100, -1]]


def test_load_map_flips_rows(tmp_path):
    img = np.zeros((3, 4), dtype=np.uint8)
    img[1, :] = 205
    img[2, :] = 254
    grid = load_map_yaml(_write_map(tmp_path, img))

    assert grid.size == (4, 3)
    assert grid.resolution == pytest.approx(0.1)
    assert grid.origin == (-1.0, -2.0)
    # 图像底部为栅格第 0 行
    assert grid.value(0, 0) == 0
    assert grid.value(0, 1) == -1
    assert grid.value(3, 2) == 100


def test_missing_key(tmp_path):
    cv2.imwrite(str(tmp_path / "map.png"), np.zeros((2, 2), dtype=np.uint8))
    yaml_path = tmp_path / "map.yaml"
    yaml_path.write_text("image: map.png\nresolution: 0.1\n", encoding="utf-8")
    with pytest.raises(InvalidGridError):
        load_map_yaml(yaml_path)


def test_missing_image(tmp_path):
    yaml_path = tmp_path / "map.yaml"
    yaml_path.write_text("image: gone.png\nresolution: 0.1\norigin: [0, 0, 0]\n", encoding="utf-8")
    with pytest.raises(InvalidGridError):
        load_map_yaml(yaml_path)


def test_missing_yaml(tmp_path):
    with pytest.raises(InvalidGridError):
        load_map_yaml(tmp_path / "map.yaml")
