"""pixelcraft.core — Foundation layer.

Contains the colour quantizer, grid store, history, codec, storage slot,
text rasterizer, settings and report builder. This module has NO
dependencies on pixelcraft.engine, pixelcraft.commands or pixelcraft.registry.
Only stdlib, numpy, PIL and scikit-learn are allowed here.
"""
