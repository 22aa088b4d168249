# transfer_learning/common/reporting.py
import os
import json
import matplotlib.pyplot as plt
from sklearn.metrics import confusion_matrix, classification_report, ConfusionMatrixDisplay


def save_model_summary(model, path):
    with open(path, "w") as f:
        model.summary(print_fn=lambda x, **kwargs: f.write(x + "\n"))


def plot_history(history, title, path):
    """Accuracy and loss curves, train vs validation"""
    hist = history.history if hasattr(history, "history") else history
    plt.figure(figsize=(12, 4))

    plt.subplot(1, 2, 1)
    plt.plot(hist.get('accuracy', []), label='Train', linewidth=2)
    plt.plot(hist.get('val_accuracy', []), label='Val', linewidth=2)
    plt.title(f'{title} - Accuracy')
    plt.xlabel('Epoch')
    plt.ylabel('Accuracy')
    plt.legend()
    plt.grid(True, alpha=0.3)

    plt.subplot(1, 2, 2)
    plt.plot(hist.get('loss', []), label='Train', linewidth=2)
    plt.plot(hist.get('val_loss', []), label='Val', linewidth=2)
    plt.title(f'{title} - Loss')
    plt.xlabel('Epoch')
    plt.ylabel('Loss')
    plt.legend()
    plt.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(path, dpi=150, bbox_inches='tight')
    plt.close()


def save_metrics(metrics, path):
    """Write metrics as JSON, merging into the file if it already exists"""
    if os.path.exists(path):
        with open(path, "r") as f:
            existing = json.load(f)
        existing.update(metrics)
        metrics = existing
    with open(path, "w") as f:
        json.dump(metrics, f, indent=4)
    return metrics


def confusion_report(y_true, y_pred, class_names):
    """Returns (confusion matrix, classification report text)"""
    labels = list(range(len(class_names)))
    cm = confusion_matrix(y_true, y_pred, labels=labels)
    report = classification_report(
        y_true, y_pred, labels=labels, target_names=class_names, zero_division=0
    )
    return cm, report


def plot_confusion_matrix(cm, class_names, title, path):
    disp = ConfusionMatrixDisplay(confusion_matrix=cm, display_labels=class_names)
    disp.plot(cmap='Blues', values_format='d')
    plt.title(title, fontsize=14, fontweight='bold')
    plt.tight_layout()
    plt.savefig(path, dpi=150, bbox_inches='tight')
    plt.close()
