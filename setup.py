#!/usr/bin/env python
"""
Setup script for mountconfig
This file is optional - modern pip can install directly from pyproject.toml
Included for compatibility with older systems
"""
from setuptools import setup

# Metadata, dependencies and entry points live in pyproject.toml
setup()
