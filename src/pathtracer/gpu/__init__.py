"""Taichi backend: scene upload, path tracing kernels and a progressive renderer.

Modules in this package allocate taichi fields at import time; call
``ti.init`` before importing them.
"""
