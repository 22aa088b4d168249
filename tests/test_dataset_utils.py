"""Tests for dataset enumeration and image feed construction."""

from pathlib import Path

import numpy as np
import pytest

from transfer_learning.common.dataset_utils import (
    count_images,
    create_generator,
    create_generators,
    describe_dataset,
)
from transfer_learning.common.preprocessing import class_mode_for
from transfer_learning.config import ExperimentConfig


def small_config(data_dir: Path, tmp_path: Path, **kwargs) -> ExperimentConfig:
    params = dict(
        data_dir=str(data_dir),
        results_dir=str(tmp_path / "results"),
        class_names=["cats", "dogs"],
        img_size=(32, 32),
        batch_size=16,
        epochs=1,
        weights=None,
    )
    params.update(kwargs)
    return ExperimentConfig(**params)


class TestCountImages:
    def test_total_is_sum_of_class_counts(self, tmp_path: Path, image_factory) -> None:
        image_factory(tmp_path / "cats", 3, base_color=0)
        image_factory(tmp_path / "dogs", 5, base_color=200)

        counts, total = count_images(tmp_path, ["cats", "dogs"])
        assert counts == {"cats": 3, "dogs": 5}
        assert total == 8

    def test_all_subfolders_counted_when_no_classes_given(
        self, tmp_path: Path, image_factory
    ) -> None:
        image_factory(tmp_path / "b", 2, base_color=0)
        image_factory(tmp_path / "a", 1, base_color=0)
        (tmp_path / "notes.txt").write_text("not a class folder")

        counts, total = count_images(tmp_path)
        assert list(counts) == ["a", "b"]
        assert total == 3

    def test_empty_class_folder_counts_zero(self, tmp_path: Path, image_factory) -> None:
        (tmp_path / "cats").mkdir()
        image_factory(tmp_path / "dogs", 2, base_color=0)

        counts, total = count_images(tmp_path, ["cats", "dogs"])
        assert counts["cats"] == 0
        assert total == 2

    def test_missing_class_folder_raises(self, tmp_path: Path, image_factory) -> None:
        image_factory(tmp_path / "cats", 1, base_color=0)
        with pytest.raises(FileNotFoundError):
            count_images(tmp_path, ["cats", "dogs"])

    def test_non_image_entries_not_counted(
        self, image_dataset_dir: Path, tmp_path: Path
    ) -> None:
        cats_dir = image_dataset_dir / "train" / "cats"
        (cats_dir / "augmented").mkdir()
        (cats_dir / "Thumbs.db").write_bytes(b"\x00\x01")
        (cats_dir / "notes.txt").write_text("labelled by hand")

        config = small_config(image_dataset_dir, tmp_path)
        counts, total = count_images(config.split_dir("train"), config.class_names)
        gen = create_generator(config.split_dir("train"), config, shuffle=False)

        assert counts == {"cats": 16, "dogs": 16}
        assert total == gen.samples

    def test_nested_images_counted_like_the_feed(
        self, image_dataset_dir: Path, tmp_path: Path, image_factory
    ) -> None:
        image_factory(image_dataset_dir / "train" / "dogs" / "extra", 3, base_color=90)

        config = small_config(image_dataset_dir, tmp_path)
        _, total = count_images(config.split_dir("train"), config.class_names)
        gen = create_generator(config.split_dir("train"), config, shuffle=False)

        assert total == gen.samples == 35

    def test_describe_dataset_reports_every_split(
        self, image_dataset_dir: Path, tmp_path: Path
    ) -> None:
        report = describe_dataset(small_config(image_dataset_dir, tmp_path))
        assert report["train"]["total"] == 32
        assert report["validation"]["total"] == 8
        assert report["test"]["counts"] == {"cats": 4, "dogs": 4}


class TestClassMode:
    def test_binary_for_two_classes(self) -> None:
        assert class_mode_for(2) == "binary"

    def test_categorical_for_more_classes(self) -> None:
        assert class_mode_for(10) == "categorical"

    def test_one_class_rejected(self) -> None:
        with pytest.raises(ValueError):
            class_mode_for(1)


class TestCreateGenerator:
    def test_batches_per_epoch(self, image_dataset_dir: Path, tmp_path: Path) -> None:
        config = small_config(image_dataset_dir, tmp_path)
        gen = create_generator(config.split_dir("train"), config, shuffle=True)
        assert gen.samples == 32
        assert len(gen) == 2

    def test_partial_last_batch(self, image_dataset_dir: Path, tmp_path: Path) -> None:
        config = small_config(image_dataset_dir, tmp_path, batch_size=5)
        gen = create_generator(config.split_dir("validation"), config, shuffle=False)
        assert len(gen) == 2
        assert gen[1][0].shape[0] == 3

    def test_batch_shapes_and_binary_labels(
        self, image_dataset_dir: Path, tmp_path: Path
    ) -> None:
        config = small_config(image_dataset_dir, tmp_path)
        gen = create_generator(config.split_dir("train"), config, shuffle=True)
        x, y = next(gen)
        assert x.shape == (16, 32, 32, 3)
        assert y.shape == (16,)
        assert set(np.unique(y)) <= {0.0, 1.0}

    def test_class_order_follows_config(
        self, image_dataset_dir: Path, tmp_path: Path
    ) -> None:
        config = small_config(image_dataset_dir, tmp_path, class_names=["dogs", "cats"])
        gen = create_generator(config.split_dir("test"), config, shuffle=False)
        assert gen.class_indices == {"dogs": 0, "cats": 1}

    def test_same_seed_gives_same_batch_order(
        self, image_dataset_dir: Path, tmp_path: Path
    ) -> None:
        config = small_config(image_dataset_dir, tmp_path, seed=123)
        first = create_generator(config.split_dir("train"), config, shuffle=True)
        second = create_generator(config.split_dir("train"), config, shuffle=True)

        for _ in range(len(first)):
            x1, y1 = next(first)
            x2, y2 = next(second)
            np.testing.assert_array_equal(x1, x2)
            np.testing.assert_array_equal(y1, y2)

    def test_missing_split_directory_raises(self, tmp_path: Path) -> None:
        config = small_config(tmp_path / "nowhere", tmp_path)
        with pytest.raises(FileNotFoundError, match="Directory not found"):
            create_generator(config.split_dir("train"), config, shuffle=False)


class TestCreateGenerators:
    def test_three_feeds_and_class_names(
        self, image_dataset_dir: Path, tmp_path: Path
    ) -> None:
        config = small_config(image_dataset_dir, tmp_path)
        train_gen, val_gen, test_gen, class_names = create_generators(config)

        assert class_names == ["cats", "dogs"]
        assert train_gen.shuffle is True
        assert val_gen.shuffle is False
        assert test_gen.shuffle is False
        assert (train_gen.samples, val_gen.samples, test_gen.samples) == (32, 8, 8)

    def test_augmented_train_feed(self, image_dataset_dir: Path, tmp_path: Path) -> None:
        config = small_config(image_dataset_dir, tmp_path, augment=True)
        train_gen, val_gen, _, _ = create_generators(config)

        assert train_gen.image_data_generator.horizontal_flip is True
        assert val_gen.image_data_generator.horizontal_flip is False
        x, y = next(train_gen)
        assert x.shape == (16, 32, 32, 3)
        assert y.shape == (16,)
        assert np.all(np.isfinite(x))

    def test_classes_inferred_when_not_configured(
        self, image_dataset_dir: Path, tmp_path: Path
    ) -> None:
        config = small_config(image_dataset_dir, tmp_path, class_names=None)
        *_, class_names = create_generators(config)
        assert class_names == ["cats", "dogs"]
