# -*- coding: utf-8 -*-
"""Offline FR/AR public-services FAQ assistant: TF-IDF retrieval, keyword rules, answer cache."""

__version__ = "0.1.0"
