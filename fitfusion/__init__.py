"""Fitness Fusion: фитнес-бот с AI-тренером."""
