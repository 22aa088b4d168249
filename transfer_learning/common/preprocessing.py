# transfer_learning/common/preprocessing.py
"""
Image generators for the directory-per-class datasets.
Every image goes through VGG16's own preprocess_input (BGR, mean-centred),
so the frozen base sees inputs in the range it was trained on.
"""

import tensorflow as tf
from tensorflow.keras.applications.vgg16 import preprocess_input


def get_image_datagen(augment=False):
    """Returns an ImageDataGenerator with VGG16 preprocessing, optionally augmenting"""
    if augment:
        return tf.keras.preprocessing.image.ImageDataGenerator(
            preprocessing_function=preprocess_input,
            rotation_range=15,
            width_shift_range=0.1,
            height_shift_range=0.1,
            shear_range=0.1,
            zoom_range=0.1,
            horizontal_flip=True,
            fill_mode='nearest'
        )
    return tf.keras.preprocessing.image.ImageDataGenerator(preprocessing_function=preprocess_input)


def class_mode_for(num_classes):
    """'binary' labels (0/1 floats) for two classes, one-hot 'categorical' otherwise"""
    if num_classes < 2:
        raise ValueError(f"Need at least two classes, got {num_classes}")
    return 'binary' if num_classes == 2 else 'categorical'
