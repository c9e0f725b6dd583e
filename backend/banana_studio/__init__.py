"""Banana Studio: prompt + reference images in, hosted-model image URLs out."""

__version__ = "1.0.0"
