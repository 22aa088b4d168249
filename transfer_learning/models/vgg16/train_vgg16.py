"""
Training entrypoint for VGG16 transfer learning.

Runs the whole workflow on a dataset laid out as:
  data_dir/
    train/
      <class_a>/ img1.jpg ...
      <class_b>/ ...
    validation/
      <class_a>/ ...
    test/
      <class_a>/ ...

1. Count images per class in every split
2. Build the train/validation/test feeds
3. Assemble VGG16 (no top) + new head, freeze the base
4. Compile, fit for a fixed number of epochs, evaluate on the test split

Paths and hyperparameters come from a preset, CLI args or env vars.
"""

import os
import json
import argparse
import tensorflow as tf
from transfer_learning.config import PRESETS, get_preset
from transfer_learning.common.dataset_utils import describe_dataset, create_generators
from transfer_learning.common.reporting import save_model_summary, plot_history, save_metrics
from transfer_learning.models.vgg16.build_vgg16 import build_vgg16_transfer, trainable_summary


def build_optimizer(name, learning_rate, momentum=0.0, decay=0.0):
    """
    Optimizer by name. decay follows the legacy Keras rule lr / (1 + decay * step),
    expressed as an InverseTimeDecay schedule.
    """
    lr = learning_rate
    if decay:
        lr = tf.keras.optimizers.schedules.InverseTimeDecay(
            initial_learning_rate=learning_rate, decay_steps=1, decay_rate=decay
        )
    name = name.lower()
    if name == 'sgd':
        return tf.keras.optimizers.SGD(learning_rate=lr, momentum=momentum)
    if name == 'rmsprop':
        return tf.keras.optimizers.RMSprop(learning_rate=lr, momentum=momentum)
    if name == 'adam':
        return tf.keras.optimizers.Adam(learning_rate=lr)
    raise ValueError(f"Unknown optimizer '{name}', expected one of: sgd, rmsprop, adam")


def loss_for(num_classes):
    if num_classes < 2:
        raise ValueError(f"Need at least two classes, got {num_classes}")
    return 'binary_crossentropy' if num_classes == 2 else 'categorical_crossentropy'


def compile_model(model, config, num_classes):
    model.compile(
        optimizer=build_optimizer(config.optimizer, config.learning_rate, config.momentum, config.decay),
        loss=loss_for(num_classes),
        metrics=['accuracy']
    )
    return model


def train_model(model, train_gen, val_gen, epochs, callbacks=None):
    """Fit for a fixed number of full passes over train_gen, validating after each epoch."""
    return model.fit(
        train_gen,
        steps_per_epoch=len(train_gen),
        validation_data=val_gen,
        validation_steps=len(val_gen),
        epochs=epochs,
        callbacks=callbacks,
        verbose=1
    )


def evaluate_model(model, test_gen):
    """Final pass over the held-out feed. Returns {'loss': ..., 'accuracy': ...}"""
    results = model.evaluate(test_gen, steps=len(test_gen), verbose=1, return_dict=True)
    return {"loss": float(results["loss"]), "accuracy": float(results["accuracy"])}


def run_experiment(config, save_model=False, callbacks=None):
    os.makedirs(config.results_dir, exist_ok=True)

    print(f"🚀 Starting VGG16 transfer learning...")
    print(f"   Data directory: {config.data_dir}")
    print(f"   Results directory: {config.results_dir}")
    print(f"   Input size: {config.img_size[0]}x{config.img_size[1]}")
    print(f"   Batch size: {config.batch_size}")
    print(f"   Epochs: {config.epochs}")

    # === Enumerate Data ===
    dataset_report = describe_dataset(config)

    # === Load Data ===
    train_gen, val_gen, test_gen, class_names = create_generators(config)
    with open(os.path.join(config.results_dir, "class_names.json"), "w") as f:
        json.dump(class_names, f, indent=2)

    # === Build Model ===
    model, _ = build_vgg16_transfer(
        input_shape=config.input_shape,
        num_classes=len(class_names),
        weights=config.weights,
        dense_units=config.dense_units,
        dropout=config.dropout,
        trainable_base_layers=config.trainable_base_layers,
    )
    model.summary()
    save_model_summary(model, os.path.join(config.results_dir, "model_summary.txt"))
    layer_summary = trainable_summary(model)

    # === Train ===
    compile_model(model, config, len(class_names))
    history = train_model(model, train_gen, val_gen, config.epochs, callbacks=callbacks)
    plot_history(history, 'VGG16', os.path.join(config.results_dir, "training_history.png"))

    # === Evaluate ===
    test_metrics = evaluate_model(model, test_gen)
    print(f"📈 Test Loss: {test_metrics['loss']:.4f}, Test Accuracy: {test_metrics['accuracy']:.4f}")

    if save_model:
        model_path = os.path.join(config.results_dir, "final_model.keras")
        model.save(model_path)
        print(f"💾 Model saved to: {model_path}")

    final_metrics = {
        "model_name": "VGG16_transfer",
        "train_accuracy": float(history.history['accuracy'][-1]),
        "val_accuracy": float(history.history['val_accuracy'][-1]),
        "val_loss": float(history.history['val_loss'][-1]),
        "test_loss": test_metrics["loss"],
        "test_accuracy": test_metrics["accuracy"],
        "dataset": {split: info["total"] for split, info in dataset_report.items()},
        "layers": layer_summary,
        "config": {
            "batch_size": config.batch_size,
            "epochs": config.epochs,
            "optimizer": config.optimizer,
            "learning_rate": config.learning_rate,
            "momentum": config.momentum,
            "decay": config.decay,
            "input_shape": list(config.input_shape),
            "class_names": class_names,
        }
    }
    save_metrics(final_metrics, os.path.join(config.results_dir, "metrics.json"))

    print(f"✅ Training complete. Results saved to: {config.results_dir}")
    return final_metrics


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Train VGG16 transfer learning on an image folder dataset")
    parser.add_argument("--preset", type=str, default=os.getenv("PRESET", "cats_and_dogs"), choices=sorted(PRESETS))
    parser.add_argument(
        "--data_dir",
        type=str,
        default=os.getenv("DATA_DIR"),
        help="Folder containing train/validation/test structure",
    )
    parser.add_argument(
        "--results_dir",
        type=str,
        default=os.getenv("RESULTS_DIR"),
        help="Folder to write the summary, plots and metrics",
    )
    parser.add_argument("--batch_size", type=int, default=int(os.getenv("BATCH_SIZE", 0)) or None)
    parser.add_argument("--epochs", type=int, default=int(os.getenv("EPOCHS", 0)) or None)
    parser.add_argument("--img_size", type=int, nargs=2, default=None)
    parser.add_argument(
        "--classes",
        type=str,
        nargs="*",
        default=None,
        help="Class folders to use (order defines label mapping)",
    )
    parser.add_argument("--optimizer", type=str, default=None, choices=["sgd", "rmsprop", "adam"])
    parser.add_argument("--learning_rate", type=float, default=None)
    parser.add_argument("--momentum", type=float, default=None)
    parser.add_argument("--decay", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--weights", type=str, default="imagenet", help="'imagenet' or 'none' for random init")
    parser.add_argument("--trainable_base_layers", type=int, default=None, help="Leave the last N base layers trainable")
    parser.add_argument("--augment", action="store_true", help="Augment the training feed")
    parser.add_argument("--save_model", action="store_true", help="Save the final model as final_model.keras")
    return parser.parse_args(argv)


def config_from_args(args):
    return get_preset(
        args.preset,
        data_dir=args.data_dir,
        results_dir=args.results_dir,
        batch_size=args.batch_size,
        epochs=args.epochs,
        img_size=tuple(args.img_size) if args.img_size else None,
        class_names=args.classes or None,
        optimizer=args.optimizer,
        learning_rate=args.learning_rate,
        momentum=args.momentum,
        decay=args.decay,
        seed=args.seed,
        weights=args.weights,
        trainable_base_layers=args.trainable_base_layers,
        augment=args.augment or None,
    )


def main(argv=None):
    args = parse_args(argv)
    config = config_from_args(args)
    return run_experiment(config, save_model=args.save_model)


if __name__ == "__main__":
    main()
