# This handles:
    # Counting images per class in each split (train/validation/test)
    # Building the per-split image generators from the class folders

# transfer_learning/common/dataset_utils.py
import os
from transfer_learning.config import SPLITS
from transfer_learning.common.preprocessing import get_image_datagen, class_mode_for

# Formats flow_from_directory loads
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".ppm", ".tif", ".tiff")


def count_images(directory, class_names=None):
    """Count the image files in each class subfolder of a split directory.
    Nested folders are walked and other files skipped, as flow_from_directory does.

    Parameters:
        directory (str | Path): Split folder containing one subfolder per class.
        class_names (list[str] | None): Class folders to count. If None, every subfolder is counted (sorted).

    Returns:
        (counts, total) where counts maps class name -> number of image files.
    """
    if class_names is None:
        class_names = sorted(
            d for d in os.listdir(directory) if os.path.isdir(os.path.join(directory, d))
        )
    counts = {}
    for cls in class_names:
        cls_dir = os.path.join(directory, cls)
        if not os.path.isdir(cls_dir):
            raise FileNotFoundError(f"Class directory not found: {cls_dir}")
        counts[cls] = sum(
            1
            for _, _, files in os.walk(cls_dir)
            for f in files
            if f.lower().endswith(IMAGE_EXTENSIONS)
        )
    return counts, sum(counts.values())


def describe_dataset(config):
    """Print and return per-class and total counts for every split"""
    print(f"📁 Dataset: {config.data_dir}")
    report = {}
    for split in SPLITS:
        counts, total = count_images(config.split_dir(split), config.class_names)
        report[split] = {"counts": counts, "total": total}
        per_class = ", ".join(f"{n} {cls}" for cls, n in counts.items())
        print(f"   {split}: {total} images ({per_class})")
    return report


def create_generator(split_dir, config, shuffle, augment=False):
    """Create a batched image feed from a directory with one subfolder per class."""
    if not os.path.exists(split_dir):
        raise FileNotFoundError(f"Directory not found: {split_dir}")

    class_names = config.class_names
    if class_names is None:
        class_names = sorted(
            d for d in os.listdir(split_dir) if os.path.isdir(os.path.join(split_dir, d))
        )

    datagen = get_image_datagen(augment=augment)
    return datagen.flow_from_directory(
        split_dir,
        target_size=config.img_size,
        batch_size=config.batch_size,
        classes=list(class_names),
        class_mode=class_mode_for(len(class_names)),
        shuffle=shuffle,
        seed=config.seed
    )


def create_generators(config):
    """
    Load the three feeds from a split directory structure:
    data_dir/
        train/
            <class>/ ...
        validation/
            <class>/ ...
        test/
            <class>/ ...

    Returns: (train_gen, val_gen, test_gen, class_names)
    Only the training feed is shuffled; all three share config.seed.
    """
    train_gen = create_generator(
        config.split_dir("train"), config, shuffle=config.shuffle, augment=config.augment
    )
    val_gen = create_generator(config.split_dir("validation"), config, shuffle=False)
    test_gen = create_generator(config.split_dir("test"), config, shuffle=False)

    # class_indices is ordered by label index
    class_names = list(train_gen.class_indices.keys())
    print(f"✅ Feeds ready with classes: {class_names}")
    print(f"   Batches per epoch: train={len(train_gen)}, val={len(val_gen)}, test={len(test_gen)}")
    return train_gen, val_gen, test_gen, class_names
