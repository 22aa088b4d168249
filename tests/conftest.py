"""Shared pytest fixtures for transfer_learning tests."""

from pathlib import Path

import pytest
from PIL import Image

CLASSES = ["cats", "dogs"]


def make_images(directory: Path, count: int, base_color: int) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for i in range(count):
        # Distinct colour per file so batches can be compared by content
        img = Image.new("RGB", (40, 40), color=(base_color, (i * 7) % 256, 150))
        img.save(directory / f"img_{i:03d}.png")


@pytest.fixture()
def image_dataset_dir(tmp_path: Path) -> Path:
    """Binary dataset in train/validation/test layout.

    train: 16 cats + 16 dogs (32 images, 2 batches of 16)
    validation: 4 + 4, test: 4 + 4
    """
    root = tmp_path / "data"
    sizes = {"train": 16, "validation": 4, "test": 4}
    for split, count in sizes.items():
        for idx, cls in enumerate(CLASSES):
            make_images(root / split / cls, count, base_color=idx * 200)
    return root


@pytest.fixture()
def image_factory():
    """Writes `count` solid-colour PNGs into a (created) directory."""
    return make_images
