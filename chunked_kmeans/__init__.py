"""Итеративный K-Means с тремя взаимозаменяемыми стратегиями исполнения."""

__version__ = "0.1.0"
