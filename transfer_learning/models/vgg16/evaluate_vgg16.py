"""
Evaluation script for a saved VGG16 transfer learning model.

Loads final_model.keras (or --model_path), runs the test split once and writes
the confusion matrix, the classification report and the test metrics.
"""

import os
import json
import argparse
import numpy as np
import tensorflow as tf
from transfer_learning.config import PRESETS, get_preset
from transfer_learning.common.dataset_utils import create_generator
from transfer_learning.common.reporting import (
    confusion_report,
    plot_confusion_matrix,
    save_metrics,
)
from transfer_learning.models.vgg16.train_vgg16 import evaluate_model


def predict_labels(model, test_gen):
    """Predicted class indices for every sample of an unshuffled feed, in file order"""
    test_gen.reset()
    predictions = model.predict(test_gen, steps=len(test_gen), verbose=1)
    if predictions.shape[-1] == 1:
        return (predictions > 0.5).astype(int).flatten()
    return np.argmax(predictions, axis=-1)


def evaluate_saved_model(model, config, class_names=None):
    test_gen = create_generator(config.split_dir("test"), config, shuffle=False)
    class_names = class_names or list(test_gen.class_indices.keys())
    print(f"✅ Test feed loaded with classes: {class_names}")
    print(f"   Found {test_gen.samples} test samples")

    print("🔍 Evaluating on test set...")
    test_metrics = evaluate_model(model, test_gen)
    print(f"Test Loss: {test_metrics['loss']:.4f}, Test Accuracy: {test_metrics['accuracy']:.4f}")

    y_true = test_gen.classes
    y_pred = predict_labels(model, test_gen)
    cm, report = confusion_report(y_true, y_pred, class_names)

    print(f"\n📋 Classification Report:")
    print("=" * 60)
    print(report)

    os.makedirs(config.results_dir, exist_ok=True)
    plot_confusion_matrix(cm, class_names, "Confusion Matrix - VGG16",
                          os.path.join(config.results_dir, "confusion_matrix.png"))
    with open(os.path.join(config.results_dir, "classification_report.txt"), "w") as f:
        f.write("Classification Report - VGG16\n")
        f.write("=" * 60 + "\n")
        f.write(report)

    evaluation_metrics = {
        "test_loss": test_metrics["loss"],
        "test_accuracy": test_metrics["accuracy"],
        "confusion_matrix": cm.tolist(),
        "class_names": class_names,
        "total_test_samples": int(test_gen.samples),
    }
    return save_metrics(evaluation_metrics, os.path.join(config.results_dir, "metrics.json"))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Evaluate a trained VGG16 transfer learning model")
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
        help="Directory containing results and model",
    )
    parser.add_argument(
        "--model_path",
        type=str,
        default=None,
        help="Path to model file (if not provided, uses final_model.keras in results_dir)"
    )
    parser.add_argument("--batch_size", type=int, default=None, help="Batch size for evaluation")
    parser.add_argument("--img_size", type=int, nargs=2, default=None)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = get_preset(
        args.preset,
        data_dir=args.data_dir,
        results_dir=args.results_dir,
        batch_size=args.batch_size,
        img_size=tuple(args.img_size) if args.img_size else None,
    )

    model_path = args.model_path or os.path.join(config.results_dir, "final_model.keras")
    if not os.path.exists(model_path):
        raise FileNotFoundError(f"Model not found at: {model_path}")

    # Label order written by the training run takes precedence over the preset
    class_names = None
    class_names_path = os.path.join(config.results_dir, "class_names.json")
    if os.path.exists(class_names_path):
        with open(class_names_path) as f:
            class_names = json.load(f)
        config.class_names = class_names

    print(f"📊 Starting VGG16 evaluation...")
    print(f"   Data directory: {config.data_dir}")
    print(f"   Model path: {model_path}")

    model = tf.keras.models.load_model(model_path)
    print(f"✅ Model loaded from: {model_path}")

    metrics = evaluate_saved_model(model, config, class_names)
    print(f"✅ Evaluation complete. Results saved to: {config.results_dir}")
    return metrics


if __name__ == "__main__":
    main()
