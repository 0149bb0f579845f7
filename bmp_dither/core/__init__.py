"""Bitmap codec, palette quantization and Floyd-Steinberg dithering."""
