"""VGG16 transfer learning on directory-per-class image datasets."""

__version__ = "0.1.0"
