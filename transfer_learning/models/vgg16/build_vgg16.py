import numpy as np
from tensorflow.keras import layers, models
from tensorflow.keras.applications import VGG16


def output_layer_params(num_classes):
    """Units and activation of the output layer for a given number of classes."""
    if num_classes < 2:
        raise ValueError(f"Need at least two classes, got {num_classes}")
    if num_classes == 2:
        return 1, 'sigmoid'
    return num_classes, 'softmax'


def freeze_base_layers(base_model, trainable_base_layers=0):
    """
    Mark every layer of the pre-trained base as non-trainable.
    With trainable_base_layers > 0 the last N base layers stay trainable (fine-tuning).
    """
    for layer in base_model.layers:
        layer.trainable = False
    if trainable_base_layers > 0:
        for layer in base_model.layers[-trainable_base_layers:]:
            layer.trainable = True
    return base_model


def build_vgg16_transfer(input_shape=(224, 224, 3),
                         num_classes=2,
                         weights='imagenet',
                         dense_units=(1024,),
                         dropout=0.0,
                         trainable_base_layers=0):
    """
    VGG16 transfer learning model.
    Loads VGG16 without its classification head, appends global average pooling,
    the dense layers in dense_units and an output layer sized for num_classes,
    then freezes the base layers.

    Returns (model, base_model). The model is not compiled.
    """
    base_model = VGG16(
        include_top=False,
        weights=weights,
        input_shape=input_shape
    )

    x = layers.GlobalAveragePooling2D(name='head_pool')(base_model.output)
    for i, units in enumerate(dense_units):
        x = layers.Dense(units, activation='relu', name=f'head_dense_{i}')(x)
        if dropout:
            x = layers.Dropout(dropout, name=f'head_dropout_{i}')(x)
    units, activation = output_layer_params(num_classes)
    outputs = layers.Dense(units, activation=activation, name='predictions')(x)

    model = models.Model(inputs=base_model.input, outputs=outputs, name='vgg16_transfer')
    freeze_base_layers(base_model, trainable_base_layers)
    return model, base_model


def count_trainable_layers(model):
    return sum(1 for layer in model.layers if layer.trainable)


def trainable_summary(model):
    """Layer and parameter counts split into trainable and frozen"""
    trainable_params = sum(int(np.prod(w.shape)) for w in model.trainable_weights)
    frozen_params = sum(int(np.prod(w.shape)) for w in model.non_trainable_weights)
    summary = {
        "trainable_layers": count_trainable_layers(model),
        "frozen_layers": len(model.layers) - count_trainable_layers(model),
        "trainable_params": trainable_params,
        "frozen_params": frozen_params,
    }
    print(f"🧊 Frozen layers: {summary['frozen_layers']} ({frozen_params:,} params)")
    print(f"🔥 Trainable layers: {summary['trainable_layers']} ({trainable_params:,} params)")
    return summary
