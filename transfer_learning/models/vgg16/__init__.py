# transfer_learning/models/vgg16/__init__.py
"""
VGG16 Transfer Learning Module

Pre-trained VGG16 base (no top, frozen) with a new pooling + dense head.
"""

from .build_vgg16 import build_vgg16_transfer, freeze_base_layers, output_layer_params
from .train_vgg16 import main as train_main
from .evaluate_vgg16 import main as evaluate_main

__all__ = [
    'build_vgg16_transfer',
    'freeze_base_layers',
    'output_layer_params',
    'train_main',
    'evaluate_main'
]
