# transfer_learning/config.py
"""
Experiment configuration shared by every stage of the workflow.

The two presets mirror the datasets the project was written for:
- cats_and_dogs: binary target (sigmoid head)
- monkey_species: 10 classes (softmax head)
"""

import os
from dataclasses import dataclass, replace

SPLITS = ("train", "validation", "test")


@dataclass
class ExperimentConfig:
    data_dir: str = os.getenv("DATA_DIR", "data")
    results_dir: str = os.getenv("RESULTS_DIR", "results/vgg16")
    train_subdir: str = "train"
    val_subdir: str = "validation"
    test_subdir: str = "test"
    class_names: list = None
    img_size: tuple = (224, 224)
    batch_size: int = 16
    epochs: int = 10
    seed: int = 42
    shuffle: bool = True
    augment: bool = False
    optimizer: str = "sgd"
    learning_rate: float = 1e-3
    momentum: float = 0.9
    decay: float = 1e-6
    weights: str = "imagenet"
    dense_units: tuple = (1024,)
    dropout: float = 0.0
    trainable_base_layers: int = 0

    def __post_init__(self):
        self.img_size = tuple(self.img_size)
        self.dense_units = tuple(self.dense_units)
        if self.class_names is not None:
            self.class_names = list(self.class_names)
        # 'none' on the command line means random initialisation
        if isinstance(self.weights, str) and self.weights.lower() == "none":
            self.weights = None
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.epochs <= 0:
            raise ValueError(f"epochs must be positive, got {self.epochs}")
        if self.class_names is not None and len(self.class_names) < 2:
            raise ValueError(f"Need at least two classes, got {self.class_names}")

    @property
    def input_shape(self):
        return (*self.img_size, 3)

    def split_dir(self, split):
        """Path of the train/validation/test directory under data_dir."""
        subdirs = {
            "train": self.train_subdir,
            "validation": self.val_subdir,
            "test": self.test_subdir,
        }
        if split not in subdirs:
            raise ValueError(f"Unknown split '{split}', expected one of {SPLITS}")
        return os.path.join(self.data_dir, subdirs[split])


PRESETS = {
    "cats_and_dogs": dict(
        class_names=["cats", "dogs"],
        img_size=(224, 224),
        batch_size=16,
        epochs=10,
        dense_units=(1024,),
    ),
    "monkey_species": dict(
        class_names=[f"n{i}" for i in range(10)],
        img_size=(224, 224),
        batch_size=16,
        epochs=10,
        dense_units=(1024, 512),
        dropout=0.5,
    ),
}


def get_preset(name, **overrides):
    """Build an ExperimentConfig from a named preset, applying overrides on top."""
    if name not in PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Available: {sorted(PRESETS)}")
    config = ExperimentConfig(**PRESETS[name])
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(config, **overrides)
