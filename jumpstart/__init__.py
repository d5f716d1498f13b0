"""Jumpstart -- scaffold, run, and extend containerized React + Vite projects."""

__version__ = "0.1.0"
